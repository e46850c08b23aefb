"""SSM Parameter Store access for secrets missing from the environment.

Stripe keys are normally injected as environment variables; deployments that
keep them in Parameter Store (SecureString under ``/greenroom/{env}/...``)
are served from here with an in-process cache.
"""

import logging
from functools import lru_cache

import boto3
from botocore.exceptions import ClientError

from greenroom.config import get_settings

logger = logging.getLogger(__name__)


class SSMServiceError(Exception):
    """Raised when SSM parameter retrieval fails."""


class SSMService:
    """Cached reader for SSM SecureString parameters.

    Usage:
        ssm = get_ssm_service()
        webhook_secret = ssm.get_parameter("/greenroom/dev/stripe/webhook_secret")
    """

    def __init__(self, region: str | None = None) -> None:
        self._client = boto3.client("ssm", region_name=region or get_settings().aws_region)
        self._cache: dict[str, str] = {}

    def get_parameter(self, name: str, *, use_cache: bool = True) -> str:
        """Retrieve a decrypted parameter value.

        Args:
            name: Full parameter path
            use_cache: Return a previously fetched value if available

        Returns:
            The decrypted parameter value.

        Raises:
            SSMServiceError: If the parameter cannot be retrieved.
        """
        if use_cache and name in self._cache:
            logger.debug("SSM cache hit for %s", name)
            return self._cache[name]

        try:
            logger.info("Fetching SSM parameter: %s", name)
            response = self._client.get_parameter(Name=name, WithDecryption=True)
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            if error_code == "ParameterNotFound":
                raise SSMServiceError(f"SSM parameter not found: {name}") from e
            if error_code == "AccessDeniedException":
                raise SSMServiceError(
                    f"Access denied to SSM parameter: {name}. "
                    "Check IAM permissions for ssm:GetParameter."
                ) from e
            raise SSMServiceError(f"Failed to retrieve SSM parameter {name}: {e}") from e

        value = response["Parameter"]["Value"]
        self._cache[name] = value
        return value

    def clear_cache(self) -> None:
        """Forget all fetched parameters."""
        self._cache.clear()


@lru_cache(maxsize=1)
def get_ssm_service() -> SSMService:
    """Get the shared SSMService instance."""
    return SSMService()
