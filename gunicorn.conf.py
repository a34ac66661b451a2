import multiprocessing
import logging.config
import re

import structlog


# resolution is I/O bound on BitXHub and IPFS; a few sync workers per core
cpu_count = multiprocessing.cpu_count()
max_workers = 8
workers = min(cpu_count * 2 + 1, max_workers)

bind = "0.0.0.0:8889"

# upstream clients carry their own timeouts, keep the worker limit above them
timeout = 60
keepalive = 5
graceful_timeout = 30
max_requests = 1000
max_requests_jitter = 50

loglevel = "info"
errorlog = "-"
accesslog = "-"
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s"'

worker_class = "sync"
preload_app = True

wsgi_app = "config.wsgi:application"


_ACCESS_LINE = re.compile(
    r"(?P<host>\S+)\s+\S+\s+(?P<user>\S+)\s+\[(?P<time>.+)\]\s+"
    r'"(?P<request>.+)"\s+(?P<status>[0-9]+)\s+(?P<size>\S+)\s+'
    r'"(?P<referer>.*)"\s+"(?P<agent>.*)"\s*\Z'
)


def access_fields(logger, name, event_dict):
    """Split a gunicorn access line into fields; lines that do not match are left alone."""
    if event_dict.get("logger") != "gunicorn.access":
        return event_dict

    m = _ACCESS_LINE.match(event_dict.get("event", ""))
    if not m:
        return event_dict

    res = m.groupdict()
    res["status"] = int(res["status"])
    res["size"] = int(res["size"]) if res["size"].isdigit() else 0
    for key in ("user", "referer"):
        if res[key] == "-":
            res[key] = None
    event_dict.update(res)

    parts = res["request"].split(" ")
    if len(parts) == 3:
        event_dict["method"], event_dict["path"], event_dict["version"] = parts
    event_dict["event"] = "gunicorn.request_handling"
    return event_dict


timestamper = structlog.processors.TimeStamper(fmt="iso", utc=True)
pre_chain = [
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    timestamper,
    access_fields,
]

logconfig_dict = {
    "version": 1,
    "disable_existing_loggers": False,
    "root": {"level": "INFO", "handlers": ["default"]},
    "loggers": {
        "gunicorn.error": {
            "level": "INFO",
            "handlers": ["default"],
            "propagate": False,
            "qualname": "gunicorn.error",
        },
        "gunicorn.access": {
            "level": "INFO",
            "handlers": ["default"],
            "propagate": False,
            "qualname": "gunicorn.access",
        },
    },
    "handlers": {
        "default": {
            "class": "logging.StreamHandler",
            "formatter": "logfmt_formatter",
        },
    },
    "formatters": {
        "logfmt_formatter": {
            "()": structlog.stdlib.ProcessorFormatter,
            "processor": structlog.processors.LogfmtRenderer(),
            "foreign_pre_chain": pre_chain,
        }
    },
}

logging.config.dictConfig(logconfig_dict)
