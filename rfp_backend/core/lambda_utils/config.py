"""
Configuration and secrets management utilities for Lambda.
"""

import json
import logging
import os
from typing import Dict, Iterable
from urllib.parse import quote_plus

import boto3

logger = logging.getLogger(__name__)


def validate_environment(required_vars: Iterable[str]) -> Dict[str, str]:
    """
    Validate required environment variables.

    Args:
        required_vars: Names that must be set and non-empty

    Returns:
        Dict with the required variables' values

    Raises:
        ValueError: One or more variables are missing (all are named)
    """
    env_config = {}
    missing = []

    for var in required_vars:
        value = os.getenv(var)
        if not value:
            missing.append(var)
        else:
            env_config[var] = value

    if missing:
        raise ValueError(f"Missing required environment variables: {', '.join(missing)}")

    logger.info("validate_environment - Environment validated")
    return env_config


def configure_secrets(env_var: str = "DATABASE_URL") -> None:
    """
    Replace the password placeholder in a database URL with the real secret.

    Reads the secret ARN from DB_SECRET_ARN. Does nothing when the URL has no
    placeholder or no ARN is configured.

    Args:
        env_var: Environment variable holding the database URL
    """
    db_url = os.getenv(env_var, "")
    db_secret_arn = os.getenv("DB_SECRET_ARN")

    if "placeholder" not in db_url or not db_secret_arn:
        return

    client = boto3.session.Session().client("secretsmanager")
    try:
        response = client.get_secret_value(SecretId=db_secret_arn)
    except Exception as e:  # pylint: disable=broad-except
        logger.error("configure_secrets - Failed to fetch DB secret: %s", e)
        return

    if "SecretString" not in response:
        return

    password = json.loads(response["SecretString"]).get("password")
    if password:
        os.environ[env_var] = db_url.replace("placeholder", quote_plus(password))
        logger.info("configure_secrets - Updated %s with secret", env_var)
