"""funcstack introspection API.

Serves the functions declared in a deployment pass so downstream tooling
(consoles, local invokers) can inspect them:

- `GET /v1/functions` - List declared functions
- `GET /v1/functions/{address}` - Get one function by construct address
- `GET /v1/pass` - Status of the deployment pass
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from funcstack import __version__
from funcstack.api.routes import deployment, functions
from funcstack.deployment_pass import DeploymentPass

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(deployment_pass: DeploymentPass) -> FastAPI:
    """Create the API for a deployment pass."""
    functions.init_pass(deployment_pass)
    logger.info(
        f"Serving pass {deployment_pass.pass_id} "
        f"({deployment_pass.functions.count()} functions)"
    )

    app = FastAPI(
        title="funcstack API",
        description="Declared functions and deferred build status",
        version=__version__,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(functions.router, prefix="/v1")
    app.include_router(deployment.router, prefix="/v1")

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "functions_loaded": deployment_pass.functions.count(),
        }

    return app
