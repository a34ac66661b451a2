import structlog

from config.env import env

LOG_LEVEL = env("LOG_LEVEL", default="INFO")

timestamper = structlog.processors.TimeStamper(fmt="iso", utc=True)

# shared by records coming from stdlib loggers (our modules, django, gunicorn)
pre_chain = [
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.ExtraAdder(),
    timestamper,
]

structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        timestamper,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ],
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "logfmt_formatter": {
            "()": structlog.stdlib.ProcessorFormatter,
            "processor": structlog.processors.LogfmtRenderer(),
            "foreign_pre_chain": pre_chain,
        },
    },
    "handlers": {
        "default": {
            "class": "logging.StreamHandler",
            "formatter": "logfmt_formatter",
        },
    },
    "root": {"level": LOG_LEVEL, "handlers": ["default"]},
    "loggers": {
        "django_structlog": {
            "level": LOG_LEVEL,
            "handlers": ["default"],
            "propagate": False,
        },
        "src": {
            "level": LOG_LEVEL,
            "handlers": ["default"],
            "propagate": False,
        },
    },
}
