from google.cloud import secretmanager
import os
import logging
from concurrent.futures import ThreadPoolExecutor

logger = logging.getLogger(__name__)

# Environment variable -> secret suffix
SECRET_MAP = {
    "GEMINI_API_KEY": "GEMINI_API_KEY",
}

REQUIRED_VARS = [
    "GEMINI_API_KEY",
]


def access_secret_version(secret_id, version_id="latest"):
    client = secretmanager.SecretManagerServiceClient()
    project_id = os.getenv("GCP_PROJECT_ID")
    name = f"projects/{project_id}/secrets/{secret_id}/versions/{version_id}"
    response = client.access_secret_version(name=name)
    return response.payload.data.decode('UTF-8')


def init_secrets():
    env = os.getenv("ENV", "DEV")
    logger.debug(f"Initializing secrets for environment: {env}")
    if env in ("PROD", "STG"):
        if not os.getenv("GCP_PROJECT_ID"):
            raise EnvironmentError("Missing required environment variable: GCP_PROJECT_ID")

        # Load secrets concurrently
        with ThreadPoolExecutor() as executor:
            futures = {
                env_var: executor.submit(
                    access_secret_version,
                    secret_id=f"QG_{env}_{secret_suffix}",
                    version_id="latest",
                )
                for env_var, secret_suffix in SECRET_MAP.items()
            }

            for env_var, future in futures.items():
                try:
                    os.environ[env_var] = future.result()
                    logger.debug(f"Set {env_var} from secret manager")
                except Exception as e:
                    logger.error(f"Failed to load secret for {env_var}: {e}")
                    raise
    else:
        logger.debug("Loading secrets from local .env file")
        from dotenv import load_dotenv
        load_dotenv()
        # older deployments set API_KEY instead
        if not os.getenv("GEMINI_API_KEY") and os.getenv("API_KEY"):
            os.environ["GEMINI_API_KEY"] = os.environ["API_KEY"]

    for var in REQUIRED_VARS:
        if not os.getenv(var):
            raise EnvironmentError(f"Missing required environment variable: {var}")

    logger.info("Successfully initialized all secrets")
