#!/usr/bin/env python3
"""Main CLI entry point for all commands."""

import argparse
import logging
import sys

from src.core.config import settings


def main():
    """Main CLI dispatcher."""
    parser = argparse.ArgumentParser(
        description="Annotation gateway CLI - manage the encrypted dataset and run the server",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument(
        "--log-level",
        default=settings.annotation_log_level,
        help="Logging level (default: ANNOTATION_LOG_LEVEL or INFO)"
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands",
        required=True
    )

    # Serve command
    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the annotation gateway with uvicorn"
    )
    serve_parser.add_argument("--host", default=settings.annotation_gateway_host)
    serve_parser.add_argument("--port", type=int, default=settings.annotation_gateway_port)

    # Encrypt command
    encrypt_parser = subparsers.add_parser(
        "encrypt",
        help="Encrypt a plaintext annotation JSON file"
    )
    encrypt_parser.add_argument("source", help="Plaintext annotation.json")
    encrypt_parser.add_argument("output", help="Destination, e.g. input/annotation.json.enc")
    encrypt_parser.add_argument(
        "--key",
        help="Secret to encrypt with (default: ANNOTATION_ENCRYPTION_KEY)"
    )

    # Inspect command
    inspect_parser = subparsers.add_parser(
        "inspect",
        help="Decrypt the dataset and print a region summary"
    )
    inspect_parser.add_argument("--path", help="Encrypted dataset (default: search configured locations)")
    inspect_parser.add_argument("--key", help="Secret (default: ANNOTATION_ENCRYPTION_KEY)")

    # Render command
    render_parser = subparsers.add_parser(
        "render",
        help="Write an overlay SVG for offline inspection"
    )
    render_parser.add_argument("--out", required=True, help="Output .svg file")
    render_parser.add_argument("--hover", help="Region id rendered as hover")
    render_parser.add_argument("--queue", nargs="*", default=[], help="Region ids rendered as queued")
    render_parser.add_argument("--disabled", nargs="*", default=[], help="Region ids treated as disabled")
    render_parser.add_argument("--outline", action="store_true", help="Include the dashed outline layer")
    render_parser.add_argument("--path", help="Encrypted dataset (default: search configured locations)")
    render_parser.add_argument("--key", help="Secret (default: ANNOTATION_ENCRYPTION_KEY)")

    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # Route to appropriate command
    if args.command == "serve":
        from .serve import main as serve_main
        serve_main(host=args.host, port=args.port)
    elif args.command == "encrypt":
        from .encrypt import main as encrypt_main
        sys.exit(encrypt_main(source=args.source, output=args.output, key=args.key))
    elif args.command == "inspect":
        from .inspect_dataset import main as inspect_main
        sys.exit(inspect_main(path=args.path, key=args.key))
    elif args.command == "render":
        from .render import main as render_main
        sys.exit(render_main(
            out=args.out,
            hover=args.hover,
            queue=args.queue,
            disabled=args.disabled,
            outline=args.outline,
            path=args.path,
            key=args.key,
        ))
    else:
        parser.print_help()
        sys.exit(1)


# When run as python -m src.cli, this file is executed directly
if __name__ == "__main__":
    main()
