"""
Synthesis run: configuration in, sealed resource graph and outputs out.

Builders run in a fixed order because each stage consumes references to
declarations made by the stage before it:

    network -> access control -> load balancing -> workload

The registry, alerting and backend sections are gated by configuration flags
and are composed in only when enabled.
"""

import logging
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from .access import build_access_control
from .backend import StateBackend, build_state_backend
from .config import Configuration, resolve_configuration
from .graph import OutputBinding, ResourceGraph
from .load_balancing import build_load_balancing
from .network import build_network
from .observability import build_alerting
from .outputs import emit_outputs
from .registry import build_registry
from .workload import build_workload

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SynthesisResult:
    """Everything a synthesis run produces, ready for the provisioning engine."""

    config: Configuration
    graph: ResourceGraph
    outputs: Tuple[OutputBinding, ...]
    backend: Optional[StateBackend] = None

    @property
    def stack_name(self) -> str:
        return self.config.prefix


def synthesize(config: Configuration) -> SynthesisResult:
    """
    Build the complete resource graph for a resolved configuration.

    Each call produces a fresh graph; identical configurations produce
    identical graphs.
    """
    logger.info(
        "Synthesizing %s in %s (port %d, backend %s, alerts %s)",
        config.prefix,
        config.region,
        config.container_port,
        config.backend_mode,
        "on" if config.alerts_enabled else "off",
    )
    graph = ResourceGraph()

    registry = build_registry(config)
    if registry is not None:
        graph.extend(registry.declarations)

    network = build_network(config)
    graph.extend(network.declarations)

    access = build_access_control(config, network.vpc)
    graph.extend(access.declarations)

    load_balancing = build_load_balancing(
        config, network.vpc, network.subnets, access.alb_security_group
    )
    graph.extend(load_balancing.declarations)

    workload = build_workload(
        config,
        network.subnets,
        access.task_security_group,
        load_balancing.target_group,
        load_balancing.listener,
    )
    graph.extend(workload.declarations)

    alerting = build_alerting(
        config, load_balancing.load_balancer, load_balancing.target_group
    )
    if alerting is not None:
        graph.extend(alerting.declarations)

    graph.seal()
    outputs = emit_outputs(graph, load_balancing.load_balancer, workload.service, registry)

    return SynthesisResult(
        config=config,
        graph=graph,
        outputs=outputs,
        backend=build_state_backend(config),
    )


def synthesize_from_environment(environ: Mapping[str, str]) -> SynthesisResult:
    """
    Resolve configuration from raw environment input, then synthesize.

    A ConfigurationError is raised before any declaration is created.
    """
    return synthesize(resolve_configuration(environ))
