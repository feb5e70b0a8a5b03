# spt_finder_cli.py
# -*- coding: utf-8 -*-

import argparse
import json
import logging
import sys

from colorama import Fore, Style, init

import path_validator
import process_utils
import spt_path_finder
from path_ranker import confidence_tier


# --- Colored print helpers ---

def print_title(text):
    """Prints a title in bright red."""
    print(f"{Style.BRIGHT}{Fore.RED}=== {text.upper()} ===")

def print_header(text):
    """Prints a section header in bright magenta."""
    print(f"\n{Style.BRIGHT}{Fore.MAGENTA}--- {text} ---{Style.RESET_ALL}")

def print_info(text):
    print(text)

def print_success(text):
    """Prints a success message in green."""
    print(f"{Fore.GREEN}{text}")

def print_warning(text):
    """Prints a warning message in yellow."""
    print(f"{Fore.YELLOW}WARNING: {text}")

def print_error(text):
    """Prints an error message in bright red."""
    print(f"{Style.BRIGHT}{Fore.RED}ERROR: {text}")


def configure_logging(verbose=False):
    log_level = logging.DEBUG if verbose else logging.INFO
    log_formatter = logging.Formatter('%(asctime)s - %(levelname)s - %(message)s', '%H:%M:%S')
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(log_formatter)
    console_handler.setLevel(log_level)
    root_logger.addHandler(console_handler)


# --- Commands ---

def cmd_detect(args):
    if args.save:
        settings, result = spt_path_finder.autofill_settings(force=args.force)
        if result is None:
            print_success("Server and client paths are already configured:")
            print_info(f"  Server: {settings.get('server_path')}")
            print_info(f"  Client: {settings.get('client_path')}")
            return 0
    else:
        result = spt_path_finder.detect_paths()

    if args.json:
        print(json.dumps(result.to_dict(include_candidates=args.candidates), indent=2))
        return 0 if result.server_path or result.client_path else 1

    print_title("SPT path detection")
    tier = confidence_tier(result.confidence)
    if result.server_path:
        print_success(f"Server: {result.server_path}")
    else:
        print_warning("Server executable not found. Please select it manually.")
    if result.client_path:
        print_success(f"Client: {result.client_path}")
    else:
        print_warning("Client executable not found. Please select it manually.")
    print_info(f"Confidence: {result.confidence}/100 ({tier})")
    if tier == "low" and (result.server_path or result.client_path):
        print_warning("Low confidence, please confirm the detected paths.")

    if args.candidates:
        print_header("Server candidates")
        for c in result.server_candidates:
            print_info(f"  {c.score:>4}  [{c.source_type.value}] {c.path}")
        print_header("Client candidates")
        for c in result.client_candidates:
            print_info(f"  {c.score:>4}  [{c.source_type.value}] {c.path}")

    errors = [hit for hit in result.search_results if hit.error]
    for hit in errors:
        print_warning(f"Probe error: {hit.error}")
    return 0 if result.server_path or result.client_path else 1


def cmd_validate(args):
    valid, error = path_validator.validate_path(args.path, args.type)
    if valid:
        print_success(f"Valid: {args.path}")
        return 0
    print_error(error)
    return 1


def cmd_record(args):
    if not args.server and not args.client:
        print_error("Give at least one of --server / --client.")
        return 2
    ok = spt_path_finder.record_launch_outcome(args.server or "", args.client or "", args.outcome == "success")
    if ok:
        print_success(f"Launch outcome recorded ({args.outcome}).")
        return 0
    print_error("Could not save the launch outcome.")
    return 1


def cmd_status(_args):
    running, names = process_utils.check_server_status()
    if running:
        print_success(f"SPT server is running ({', '.join(names)}).")
        return 0
    print_info("SPT server is not running.")
    return 1


def build_parser():
    parser = argparse.ArgumentParser(description='Locate the SPT server and client executables.')
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    detect = subparsers.add_parser("detect", help="Search for the server and client executables.")
    detect.add_argument("--json", action="store_true", help="Print the full result as JSON.")
    detect.add_argument("--candidates", action="store_true", help="Include the ranked candidate lists.")
    detect.add_argument("--save", action="store_true", help="Fill missing paths in the settings file.")
    detect.add_argument("--force", action="store_true", help="With --save, overwrite configured paths.")
    detect.set_defaults(func=cmd_detect)

    validate = subparsers.add_parser("validate", help="Check a selected executable.")
    validate.add_argument("path")
    validate.add_argument("--type", choices=["server", "client"], default=None)
    validate.set_defaults(func=cmd_validate)

    record = subparsers.add_parser("record", help="Report the outcome of a launch attempt.")
    record.add_argument("outcome", choices=["success", "failure"])
    record.add_argument("--server", default="")
    record.add_argument("--client", default="")
    record.set_defaults(func=cmd_record)

    status = subparsers.add_parser("status", help="Check whether the server is running.")
    status.set_defaults(func=cmd_status)
    return parser


def main(argv=None):
    init(autoreset=True)
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
