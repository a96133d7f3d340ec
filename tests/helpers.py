from botocore.exceptions import ClientError

GROUP_ID = "sg-0123456789abcdef0"


def api_rule(rule_id, description, cidr="1.2.3.4/32", egress=False, protocol="tcp", from_port=22, to_port=22,
             group_id=GROUP_ID):
    return {
        "SecurityGroupRuleId": rule_id,
        "GroupId": group_id,
        "IsEgress": egress,
        "IpProtocol": protocol,
        "FromPort": from_port,
        "ToPort": to_port,
        "CidrIpv4": cidr,
        "Description": description,
    }


def list_params(group_id=GROUP_ID, next_token=None):
    params = {"Filters": [{"Name": "group-id", "Values": [group_id]}]}
    if next_token:
        params["NextToken"] = next_token
    return params


def revoke_params(rule_id, group_id=GROUP_ID):
    return {"GroupId": group_id, "SecurityGroupRuleIds": [rule_id]}


def authorize_params(cidr, protocol="tcp", from_port=22, to_port=22, group_id=GROUP_ID):
    return {
        "GroupId": group_id,
        "IpProtocol": protocol,
        "FromPort": from_port,
        "ToPort": to_port,
        "CidrIp": cidr,
    }


def authorize_response(new_rule_id, cidr, protocol="tcp", from_port=22, to_port=22, group_id=GROUP_ID):
    return {
        "Return": True,
        "SecurityGroupRules": [
            {
                "SecurityGroupRuleId": new_rule_id,
                "GroupId": group_id,
                "IsEgress": False,
                "IpProtocol": protocol,
                "FromPort": from_port,
                "ToPort": to_port,
                "CidrIpv4": cidr,
            }
        ],
    }


def describe_params(new_rule_id, description, group_id=GROUP_ID):
    return {
        "GroupId": group_id,
        "SecurityGroupRuleDescriptions": [
            {"SecurityGroupRuleId": new_rule_id, "Description": description}
        ],
    }


def client_error(code, operation, message=""):
    return ClientError({"Error": {"Code": code, "Message": message}}, operation)


class FakePaginator:
    def __init__(self, pages):
        self.pages = pages

    def paginate(self, **kwargs):
        for page in self.pages:
            if isinstance(page, Exception):
                raise page
            yield page


class FakeEc2:
    """
    EC2 client answering by operation name rather than call order.

    Scanning and updating share one client from two threads, so the order of
    list and mutate calls is not fixed; ``calls`` records what was made.
    """

    def __init__(self, pages, failures=None):
        self.pages = pages
        self.failures = failures or {}
        self.calls = []

    def _call(self, operation, **kwargs):
        self.calls.append((operation, kwargs))
        if operation in self.failures:
            raise self.failures[operation]

    def operations(self):
        return [operation for operation, _ in self.calls]

    def get_paginator(self, operation):
        return FakePaginator(self.pages)

    def revoke_security_group_ingress(self, **kwargs):
        self._call("revoke_security_group_ingress", **kwargs)
        return {"Return": True}

    def authorize_security_group_ingress(self, **kwargs):
        self._call("authorize_security_group_ingress", **kwargs)
        return authorize_response(
            "sgr-new",
            kwargs["CidrIp"],
            protocol=kwargs["IpProtocol"],
            from_port=kwargs["FromPort"],
            to_port=kwargs["ToPort"],
            group_id=kwargs["GroupId"],
        )

    def update_security_group_rule_descriptions_ingress(self, **kwargs):
        self._call("update_security_group_rule_descriptions_ingress", **kwargs)
        return {"Return": True}
