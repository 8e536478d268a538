from .parser import SignatureParser, parse_signature
from .writer import SignatureWriter
from .walker import iter_signature_files

__all__ = ["SignatureParser", "parse_signature", "SignatureWriter", "iter_signature_files"]
