import argparse
import logging
import sys
from typing import List, Optional

from .assembler import generate
from .config import load_config
from .errors import ConfigError, XsdBindError
from .loader import load_proto_tree
from .targets import TARGETS

logger = logging.getLogger(__name__)


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate data-binding type declarations from an XSD")
    parser.add_argument("xsd_path", help="Path or URL of the XSD file")
    parser.add_argument("-l", "--language", help=f"Target language ({', '.join(sorted(TARGETS))}); default go")
    parser.add_argument("-o", "--output", help="Output base path; the language suffix is appended")
    parser.add_argument("-p", "--package", help="Package or module name written into the generated source")
    parser.add_argument("--config", help="Path to a YAML config file (default: ./xsdbind.yaml when present)")
    parser.add_argument("--header", help="Extra line added to the generated header comment")
    parser.add_argument("--strict", action="store_true", default=None,
                        help="Fail on type references that are neither declared nor builtin")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_argument_parser().parse_args(argv)

    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
    if args.verbose:
        logging.getLogger("xsdbind").setLevel(logging.DEBUG)

    try:
        config = load_config(args.config).merged(
            language=args.language,
            output=args.output,
            package=args.package,
            header=args.header,
            strict=args.strict,
        )
        tree = load_proto_tree(args.xsd_path)
        result = generate(tree, config)
    except ConfigError as e:
        logger.error(f"Invalid configuration: {e.message}")
        if e.suggestion:
            logger.error(e.suggestion)
        return 1
    except XsdBindError as e:
        logger.error(f"Error generating code: {e}")
        return 1

    logger.info(f"Wrote {len(result.declarations)} declarations to {result.path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
