"""
Unit tests for the security group builder.
"""

import pytest

from tv_devops_infra import Ref, resolve_configuration
from tv_devops_infra.access import build_access_control
from tv_devops_infra.network import build_network


def _build(environ):
    config = resolve_configuration(environ)
    return build_access_control(config, build_network(config).vpc)


class TestAccessControl:
    def test_public_group_admits_http_from_anywhere(self):
        access = _build({})
        ingress = access.alb_security_group.properties["SecurityGroupIngress"]

        assert ingress == [{"IpProtocol": "tcp", "FromPort": 80, "ToPort": 80, "CidrIp": "0.0.0.0/0"}]

    @pytest.mark.parametrize("port", ["3000", "8080", "443"])
    def test_task_group_only_admits_the_load_balancer(self, port):
        access = _build({"CONTAINER_PORT": port})
        (rule,) = access.task_security_group.properties["SecurityGroupIngress"]

        assert rule["FromPort"] == int(port)
        assert rule["ToPort"] == int(port)
        assert rule["SourceSecurityGroupId"] == Ref("AlbSecurityGroup", "GroupId")
        assert "CidrIp" not in rule
        assert "CidrIpv6" not in rule

    def test_both_groups_allow_all_egress(self):
        access = _build({})
        for group in access.declarations:
            assert group.properties["SecurityGroupEgress"] == [
                {"IpProtocol": "-1", "FromPort": 0, "ToPort": 0, "CidrIp": "0.0.0.0/0"}
            ]
            assert group.properties["VpcId"] == Ref("Vpc")

    def test_group_names_use_the_prefix(self):
        access = _build({"PROJECT_NAME": "shop", "ENVIRONMENT": "qa"})

        assert access.alb_security_group.properties["GroupName"] == "shop-qa-alb-sg"
        assert access.task_security_group.properties["GroupName"] == "shop-qa-task-sg"
