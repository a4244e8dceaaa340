"""
tv-devops infrastructure

Resolves environment-driven configuration into a graph of CloudFormation
resource declarations for a Fargate service behind an Application Load
Balancer, and renders that graph into an AWS CDK stack.
"""

from .config import Configuration, resolve_configuration
from .errors import (
    ConfigurationError,
    CyclicReferenceError,
    DanglingReferenceError,
    DuplicateNameError,
    GraphReferenceError,
    GraphStateError,
    InvalidNameError,
    SynthesisError,
)
from .graph import ConditionalSubgraph, Join, OutputBinding, Ref, ResourceDeclaration, ResourceGraph
from .stack import ServiceStack, build_app
from .synthesis import SynthesisResult, synthesize, synthesize_from_environment

__all__ = [
    "Configuration",
    "resolve_configuration",
    "ConfigurationError",
    "CyclicReferenceError",
    "DanglingReferenceError",
    "DuplicateNameError",
    "GraphReferenceError",
    "GraphStateError",
    "InvalidNameError",
    "SynthesisError",
    "ConditionalSubgraph",
    "Join",
    "OutputBinding",
    "Ref",
    "ResourceDeclaration",
    "ResourceGraph",
    "ServiceStack",
    "build_app",
    "SynthesisResult",
    "synthesize",
    "synthesize_from_environment",
]
