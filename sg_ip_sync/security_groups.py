from botocore.exceptions import BotoCoreError, ClientError

from sg_ip_sync.format import dumps
from sg_ip_sync.models import IngressRule, RuleOutcome, RuleState, UpdateSummary
from sg_ip_sync.pylog import get_logger

logger = get_logger("sg-ip-sync.security_groups")

AWS_ERRORS = (ClientError, BotoCoreError)


class UnexpectedResponse(BotoCoreError):
    fmt = "{reason}"

    def __init__(self, reason):
        super().__init__(reason=reason)


# put on the queue by the producer once scanning is finished
STOP = object()


def iter_matching_rules(client, group_id, criteria):
    """
    Yield the ingress rules of ``group_id`` whose description matches ``criteria``.

    Every page of ``describe_security_group_rules`` is read in order. A page
    error is logged and re-raised, so no rule after the failing page is emitted.
    """
    paginator = client.get_paginator("describe_security_group_rules")
    pages = paginator.paginate(Filters=[{"Name": "group-id", "Values": [group_id]}])
    page_number = 0
    try:
        for page in pages:
            page_number += 1
            for item in page.get("SecurityGroupRules", []):
                rule = IngressRule.from_api(item)
                if rule.is_egress or not criteria.matches(rule.description):
                    continue
                yield rule
    except AWS_ERRORS as e:
        logger.error(
            "Unable to list rules of %s (page %s): %s" % (group_id, page_number + 1, e)
        )
        raise
    logger.debug("Listed %s page(s) of rules for %s" % (page_number, group_id))


class RuleUpdater:
    def __init__(self, client, cidr, dry_run=False, force=False):
        self.client = client
        self.cidr = cidr
        self.dry_run = dry_run
        self.force = force

    def consume(self, queue):
        summary = UpdateSummary()
        while True:
            rule = queue.get()
            try:
                if rule is STOP:
                    break
                summary.add(self.update(rule))
            finally:
                queue.task_done()
        return summary

    def update(self, rule):
        outcome = RuleOutcome(rule=rule)
        logger.info(
            "Updating %s %s %s %s %s"
            % (rule.rule_id, rule.ip_protocol, rule.ports, rule.cidr_ipv4, dumps(rule.description)),
            extra={"rule": dumps(rule)},
        )

        if self.dry_run:
            outcome.state = RuleState.SKIPPED
            return outcome

        if rule.cidr_ipv4 == self.cidr and not self.force:
            logger.info("Rule %s already allows %s, leaving it" % (rule.rule_id, self.cidr))
            outcome.state = RuleState.SKIPPED
            return outcome

        for step in (self._revoke, self._authorize, self._describe):
            try:
                step(outcome)
            except AWS_ERRORS as e:
                return self._fail(outcome, e)

        outcome.state = RuleState.DONE
        logger.info("Rule %s replaced by %s for %s" % (rule.rule_id, outcome.new_rule_id, self.cidr))
        return outcome

    def _revoke(self, outcome):
        rule = outcome.rule
        self.client.revoke_security_group_ingress(
            GroupId=rule.group_id,
            SecurityGroupRuleIds=[rule.rule_id],
        )
        outcome.state = RuleState.REVOKED
        logger.info("Revoked %s under existing rule %s" % (rule.cidr_ipv4, rule.rule_id))

    def _authorize(self, outcome):
        rule = outcome.rule
        response = self.client.authorize_security_group_ingress(
            GroupId=rule.group_id,
            IpProtocol=rule.ip_protocol,
            FromPort=rule.from_port,
            ToPort=rule.to_port,
            CidrIp=self.cidr,
        )
        new_rules = response.get("SecurityGroupRules", [])
        if len(new_rules) != 1:
            raise UnexpectedResponse(
                "authorize returned %s rules, expected 1" % len(new_rules)
            )
        outcome.new_rule_id = new_rules[0]["SecurityGroupRuleId"]
        outcome.state = RuleState.AUTHORIZED
        logger.info("Authorized %s under new rule %s" % (self.cidr, outcome.new_rule_id))

    def _describe(self, outcome):
        rule = outcome.rule
        self.client.update_security_group_rule_descriptions_ingress(
            GroupId=rule.group_id,
            SecurityGroupRuleDescriptions=[
                {
                    "SecurityGroupRuleId": outcome.new_rule_id,
                    "Description": rule.description,
                }
            ],
        )
        outcome.state = RuleState.DESCRIBED
        logger.info("Updated description of %s" % outcome.new_rule_id)

    def _fail(self, outcome, error):
        rule = outcome.rule
        outcome.failed_at = outcome.state
        outcome.state = RuleState.FAILED
        outcome.error = str(error)
        attempted = {
            "rule_id": rule.rule_id,
            "group_id": rule.group_id,
            "ip_protocol": rule.ip_protocol,
            "from_port": rule.from_port,
            "to_port": rule.to_port,
            "cidr": self.cidr,
            "description": rule.description,
            "new_rule_id": outcome.new_rule_id,
        }
        if outcome.failed_at == RuleState.PENDING:
            message = "Unable to revoke existing rule %s in %s, left untouched"
        elif outcome.failed_at == RuleState.REVOKED:
            message = "Unable to authorize new rule for %s in %s, rule is lost"
        else:
            message = "Unable to update description for %s in %s"
        logger.error(
            (message + ": %s %s") % (rule.rule_id, rule.group_id, error, dumps(attempted)),
            extra={"attempted": attempted},
        )
        return outcome
