#!/usr/bin/env python3
"""
CDK app for the tv-devops Fargate service.

Configuration comes from environment variables (optionally loaded from a
local .env file): AWS_REGION, PROJECT_NAME, ENVIRONMENT, IMAGE_URI,
CONTAINER_PORT, AWS_ACCOUNT_ID, TF_BACKEND, TF_STATE_BUCKET, TF_LOCK_TABLE,
TF_STATE_KEY, AWS_PROFILE, ALERTS_ENABLED, ALERT_EMAIL and
ECR_REPOSITORY_ENABLED.
"""

import logging
import os
import sys

from dotenv import load_dotenv

from tv_devops_infra import SynthesisError, build_app, synthesize_from_environment

logger = logging.getLogger("tv_devops_infra")


def main() -> int:
    """
    Resolve configuration, build the resource graph and synthesize the stack.

    Returns:
        int: Process exit status
    """
    # Variables already set in the environment win over the .env file
    load_dotenv(override=False)

    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        synthesis = synthesize_from_environment(os.environ)
    except SynthesisError as e:
        logger.error("Synthesis failed: %s", e)
        return 1

    app = build_app(synthesis)
    app.synth()
    logger.info(
        "Synthesized stack %s with %d resources and %d outputs",
        synthesis.stack_name,
        len(synthesis.graph),
        len(synthesis.outputs),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
