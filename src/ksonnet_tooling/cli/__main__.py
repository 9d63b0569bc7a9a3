import argparse

from .check import register_check_subcommand
from .preview import register_preview_subcommand


def main():
    parser = argparse.ArgumentParser(prog="ksonnet-tooling")
    subparsers = parser.add_subparsers(dest="command", required=True)

    register_check_subcommand(subparsers)
    register_preview_subcommand(subparsers)

    args = parser.parse_args()
    args.func(args)


if __name__ == "__main__":
    main()
