"""
CDK stack that hands a synthesized resource graph to CloudFormation.

Each declaration becomes a ``CfnResource`` whose logical ID is the
declaration name; forward references become ``Ref`` / ``Fn::GetAtt`` tokens
that CloudFormation resolves at deploy time.
"""

import logging
from typing import Any, Dict, Mapping, Optional

import aws_cdk as cdk
from aws_cdk import CfnOutput, CfnResource, Fn, Stack, Tags, Token
from constructs import Construct

from .graph import Join, Ref
from .synthesis import SynthesisResult

logger = logging.getLogger(__name__)


def output_logical_id(name: str) -> str:
    """Convert an output name such as ``alb_dns_name`` into ``AlbDnsName``."""
    return "".join(part[:1].upper() + part[1:] for part in name.split("_") if part)


class ServiceStack(Stack):
    """
    CloudFormation stack for the tv-devops Fargate service.

    The stack adds nothing of its own: every resource, edge and output comes
    from the SynthesisResult it is given.
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        synthesis: SynthesisResult,
        **kwargs
    ) -> None:
        """
        Initialize the stack.

        Args:
            scope: The scope in which to define this construct
            construct_id: The scoped construct ID
            synthesis: Sealed graph, outputs and backend settings to render
            **kwargs: Additional stack properties
        """
        super().__init__(scope, construct_id, **kwargs)

        self.synthesis = synthesis
        self.resources: Dict[str, CfnResource] = {}

        self._create_resources()
        self._create_outputs()
        self._apply_backend_metadata()
        self._add_tags()

    def _create_resources(self) -> None:
        """Render declarations in dependency order."""
        graph = self.synthesis.graph
        for name in graph.topological_order():
            declaration = graph.get(name)
            resource = CfnResource(
                self,
                declaration.name,
                type=declaration.type,
                properties=self._render(declaration.properties),
            )
            for dependency in declaration.depends_on:
                resource.add_dependency(self.resources[dependency])
            self.resources[name] = resource

        logger.info("Rendered %d resources into %s", len(self.resources), self.stack_name)

    def _create_outputs(self) -> None:
        for output in self.synthesis.outputs:
            CfnOutput(
                self,
                output_logical_id(output.name),
                value=Token.as_string(self._render(output.value)),
                description=output.description,
            )

    def _apply_backend_metadata(self) -> None:
        backend = self.synthesis.backend
        if backend is not None:
            self.template_options.metadata = {"StateBackend": backend.to_metadata()}

    def _add_tags(self) -> None:
        """
        Tag the stack itself.

        Generic CfnResource constructs carry no tag manager, so these tags do
        not reach the rendered resources; each declaration carries its own
        Tags list from ``Configuration.tags``.
        """
        config = self.synthesis.config
        Tags.of(self).add("Project", config.project)
        Tags.of(self).add("Environment", config.environment)
        Tags.of(self).add("ManagedBy", "CDK")

    def _render(self, value: Any) -> Any:
        """Translate Ref and Join handles into CDK tokens, recursively."""
        if isinstance(value, Ref):
            resource = self.resources[value.target]
            if value.attribute is None:
                return resource.ref
            return Token.as_string(resource.get_att(value.attribute))
        if isinstance(value, Join):
            return Fn.join(value.delimiter, [self._render(part) for part in value.parts])
        if isinstance(value, Mapping):
            return {key: self._render(item) for key, item in value.items()}
        if isinstance(value, (list, tuple)):
            return [self._render(item) for item in value]
        return value


def build_app(synthesis: SynthesisResult, app: Optional[cdk.App] = None) -> cdk.App:
    """Create (or reuse) a CDK app holding the service stack for a synthesis run."""
    app = app or cdk.App()
    config = synthesis.config
    ServiceStack(
        app,
        synthesis.stack_name,
        synthesis=synthesis,
        env=cdk.Environment(account=config.account_id, region=config.region),
        description=f"Fargate service behind an Application Load Balancer ({config.prefix})",
    )
    return app
