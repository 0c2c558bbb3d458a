"""quickapp-deploy - Fetch and unpack quick app packages into a local workspace."""

__version__ = "0.1.0"

from quickapp_deploy.core.config import Settings
from quickapp_deploy.deploy.models import DeploymentRequest, DeploymentResult
from quickapp_deploy.deploy.processor import DeployProcessor

__all__ = ["Settings", "DeploymentRequest", "DeploymentResult", "DeployProcessor", "__version__"]
