import argparse
import sys

import boto3
import requests
from botocore.exceptions import BotoCoreError, ClientError

from sg_ip_sync.config import Settings
from sg_ip_sync.format import dumps
from sg_ip_sync.models import MatchCriteria, target_cidr
from sg_ip_sync.pylog import get_logger, quiet_sdk_loggers
from sg_ip_sync.request import InvalidPublicIP, get_public_ip
from sg_ip_sync.sync import sync_rules

logger = get_logger("sg-ip-sync")

EXIT_USAGE = 1
EXIT_FATAL = 1
EXIT_RULE_FAILURES = 3

TRUE_VALUES = ("1", "t", "T", "TRUE", "true", "True")
FALSE_VALUES = ("0", "f", "F", "FALSE", "false", "False")


def flag_bool(value):
    # accepts -flag, -flag=true and -flag=false
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise argparse.ArgumentTypeError("invalid boolean value: %r" % value)


def build_parser():
    parser = argparse.ArgumentParser(
        prog="sg-ip-sync",
        description="Point security group ingress rules, selected by description, at this host's public IP.",
    )
    parser.add_argument("-group-id", "--group-id", dest="group_id", default="", help="Security Group ID")
    parser.add_argument(
        "-starts-with",
        "--starts-with",
        dest="starts_with",
        default="",
        help="Match all rules which have description starting with a string",
    )
    parser.add_argument(
        "-contains",
        "--contains",
        dest="contains",
        default="",
        help="Match all rules which have description containing a string",
    )
    parser.add_argument(
        "-dry-run",
        "--dry-run",
        dest="dry_run",
        nargs="?",
        const=True,
        default=False,
        type=flag_bool,
        help="Only output details without actually updating rules",
    )
    parser.add_argument(
        "-force",
        "--force",
        dest="force",
        nargs="?",
        const=True,
        default=False,
        type=flag_bool,
        help="Always revoke and re-create matched rules. By default rules that already allow the current IP "
        "are skipped rather than replaced",
    )
    parser.add_argument(
        "-fail-on-error",
        "--fail-on-error",
        dest="fail_on_error",
        nargs="?",
        const=True,
        default=False,
        type=flag_bool,
        help=f"Exit with status {EXIT_RULE_FAILURES} when any rule could not be updated",
    )
    parser.add_argument("-region", "--region", dest="region", default=None, help="AWS region")
    parser.add_argument("-profile", "--profile", dest="profile", default=None, help="AWS profile name")
    return parser


def build_client(profile=None, region=None):
    session = boto3.Session(profile_name=profile, region_name=region)
    return session.client("ec2")


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.group_id or not (args.starts_with or args.contains):
        parser.print_usage(sys.stderr)
        return EXIT_USAGE

    quiet_sdk_loggers()
    criteria = MatchCriteria(prefix=args.starts_with, substring=args.contains)

    try:
        settings = Settings.from_env()
    except ValueError as e:
        logger.error("Invalid configuration: %s" % e)
        return EXIT_FATAL

    try:
        public_ip = get_public_ip(settings.ip_url, timeout=settings.ip_timeout, max_tries=settings.ip_tries)
    except (requests.RequestException, InvalidPublicIP) as e:
        logger.error("Unable to determine public IP: %s" % e)
        return EXIT_FATAL
    logger.info("Public IP: %s" % public_ip)

    try:
        client = build_client(args.profile or settings.profile, args.region or settings.region)
        summary = sync_rules(
            client,
            args.group_id,
            criteria,
            target_cidr(public_ip),
            dry_run=args.dry_run,
            force=args.force,
        )
    except (ClientError, BotoCoreError) as e:
        logger.error("Unable to sync rules of %s: %s" % (args.group_id, e))
        return EXIT_FATAL

    logger.info("Summary %s" % dumps(summary.to_dict()))
    if args.fail_on_error and summary.failed:
        return EXIT_RULE_FAILURES
    return 0


if __name__ == "__main__":
    sys.exit(main())
