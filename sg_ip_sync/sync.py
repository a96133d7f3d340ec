from concurrent.futures import ThreadPoolExecutor
from queue import Full, Queue

from sg_ip_sync.pylog import get_logger
from sg_ip_sync.security_groups import AWS_ERRORS, STOP, RuleUpdater, iter_matching_rules

logger = get_logger("sg-ip-sync.sync")

HANDOFF_POLL_SECONDS = 1


def hand_over(handoff, item, future):
    # blocks while the updater is busy; gives up if the updater has died
    while True:
        try:
            handoff.put(item, timeout=HANDOFF_POLL_SECONDS)
            return
        except Full:
            if future.done():
                future.result()
                return


def log_summary(group_id, summary):
    logger.info(
        "Processed %s matching rule(s) in %s: %s updated, %s skipped, %s failed"
        % (len(summary.outcomes), group_id, summary.updated, summary.skipped, summary.failed)
    )
    for rule in summary.lost:
        logger.error(
            "Rule %s (%s %s %s) was revoked and not replaced"
            % (rule.rule_id, rule.ip_protocol, rule.ports, rule.description)
        )


def sync_rules(client, group_id, criteria, cidr, dry_run=False, force=False):
    """
    Scan ``group_id`` for matching ingress rules and point each one at ``cidr``.

    Scanning runs in the calling thread and hands rules one at a time to a
    single updater thread. Returns the updater's UpdateSummary once every
    matched rule has been processed. A listing error is raised only after
    the updater has finished the rules already handed over and the summary
    has been logged.
    """
    handoff = Queue(maxsize=1)
    updater = RuleUpdater(client, cidr, dry_run=dry_run, force=force)
    scan_error = None

    with ThreadPoolExecutor(max_workers=1, thread_name_prefix="rule-updater") as executor:
        future = executor.submit(updater.consume, handoff)
        try:
            for rule in iter_matching_rules(client, group_id, criteria):
                hand_over(handoff, rule, future)
        except AWS_ERRORS as e:
            scan_error = e
        finally:
            hand_over(handoff, STOP, future)
        summary = future.result()

    log_summary(group_id, summary)
    if scan_error is not None:
        raise scan_error
    return summary
