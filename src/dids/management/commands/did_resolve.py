import json

from django.core.management.base import BaseCommand, CommandError

from src.dids.resolver import services
from src.dids.resolver.address import normalize_address
from src.dids.resolver.errors import ResolutionError
from src.dids.resolver.metadata import decode_metadata


class Command(BaseCommand):
    help = "Resolve a DID through the BitXHub registry and IPFS, print the DID document"

    def add_arguments(self, parser):
        parser.add_argument("did", type=str)
        parser.add_argument("--indent", type=int, default=2)
        parser.add_argument(
            "--metadata",
            action="store_true",
            help="Only query the registry and print the decoded metadata.",
        )

    def handle(self, *args, **opts):
        resolver = services.get_resolver()
        try:
            if opts["metadata"]:
                info = decode_metadata(resolver.ledger.query(opts["did"]))
                out = {
                    "method": info.method,
                    "owner": info.owner,
                    "docAddr": info.doc_addr,
                    "address": normalize_address(info.doc_addr),
                    "docHash": info.doc_hash.hex(),
                    "status": info.status,
                }
            else:
                out = resolver.resolve(opts["did"]).to_json()
        except ResolutionError as exc:
            self.stdout.write(json.dumps(exc.to_payload(), indent=opts["indent"]))
            raise CommandError(f"Resolution failed at {exc.stage} ({exc.code})")

        self.stdout.write(json.dumps(out, indent=opts["indent"], ensure_ascii=False))
