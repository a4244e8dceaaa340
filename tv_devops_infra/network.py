"""
Network topology: VPC, two public subnets, internet gateway and routing.

The shape is fixed. The load balancer needs subnets in at least two
availability zones, so there are always exactly two subnets, one in zone
"a" and one in zone "b" of the configured region.
"""

from dataclasses import dataclass
from typing import List, Tuple

from .config import Configuration
from .graph import ResourceDeclaration

VPC_CIDR = "10.0.0.0/16"
SUBNET_CIDRS = ("10.0.1.0/24", "10.0.2.0/24")
ANY_IPV4 = "0.0.0.0/0"


@dataclass(frozen=True)
class NetworkResources:
    """Declarations produced by the network builder, plus handles to them."""

    vpc: ResourceDeclaration
    subnets: Tuple[ResourceDeclaration, ResourceDeclaration]
    internet_gateway: ResourceDeclaration
    gateway_attachment: ResourceDeclaration
    route_table: ResourceDeclaration
    default_route: ResourceDeclaration
    associations: Tuple[ResourceDeclaration, ResourceDeclaration]

    @property
    def declarations(self) -> List[ResourceDeclaration]:
        return [
            self.vpc,
            *self.subnets,
            self.internet_gateway,
            self.gateway_attachment,
            self.route_table,
            self.default_route,
            *self.associations,
        ]


def build_network(config: Configuration) -> NetworkResources:
    """
    Declare the VPC and its public routing.

    Args:
        config: Resolved configuration for this run

    Returns:
        NetworkResources: VPC, subnets, gateway, route table and associations
    """
    vpc = ResourceDeclaration(
        name="Vpc",
        type="AWS::EC2::VPC",
        properties={
            "CidrBlock": VPC_CIDR,
            "EnableDnsHostnames": True,
            "EnableDnsSupport": True,
            "Tags": config.tags(f"{config.prefix}-vpc"),
        },
    )

    subnets = tuple(
        ResourceDeclaration(
            name=f"Subnet{suffix.upper()}",
            type="AWS::EC2::Subnet",
            properties={
                "VpcId": vpc.ref(),
                "CidrBlock": cidr,
                "AvailabilityZone": zone,
                "MapPublicIpOnLaunch": True,
                "Tags": config.tags(f"{config.prefix}-public-{suffix}"),
            },
        )
        for suffix, cidr, zone in zip(("a", "b"), SUBNET_CIDRS, config.availability_zones)
    )

    internet_gateway = ResourceDeclaration(
        name="InternetGateway",
        type="AWS::EC2::InternetGateway",
        properties={"Tags": config.tags(f"{config.prefix}-igw")},
    )

    gateway_attachment = ResourceDeclaration(
        name="GatewayAttachment",
        type="AWS::EC2::VPCGatewayAttachment",
        properties={
            "VpcId": vpc.ref(),
            "InternetGatewayId": internet_gateway.ref(),
        },
    )

    route_table = ResourceDeclaration(
        name="PublicRouteTable",
        type="AWS::EC2::RouteTable",
        properties={
            "VpcId": vpc.ref(),
            "Tags": config.tags(f"{config.prefix}-public-rt"),
        },
    )

    # A route to an unattached gateway is rejected by EC2
    default_route = ResourceDeclaration(
        name="DefaultRoute",
        type="AWS::EC2::Route",
        properties={
            "RouteTableId": route_table.ref(),
            "DestinationCidrBlock": ANY_IPV4,
            "GatewayId": internet_gateway.ref(),
        },
        depends_on=(gateway_attachment.name,),
    )

    associations = tuple(
        ResourceDeclaration(
            name=f"{subnet.name}RouteTableAssociation",
            type="AWS::EC2::SubnetRouteTableAssociation",
            properties={
                "RouteTableId": route_table.ref(),
                "SubnetId": subnet.ref(),
            },
        )
        for subnet in subnets
    )

    return NetworkResources(
        vpc=vpc,
        subnets=subnets,
        internet_gateway=internet_gateway,
        gateway_attachment=gateway_attachment,
        route_table=route_table,
        default_route=default_route,
        associations=associations,
    )
