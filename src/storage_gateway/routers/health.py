from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
async def health_check(request: Request):
    """
    Health check endpoint for monitoring API status and component readiness.

    Reports which collaborator backs each capability along with the
    deployment mode. It does not call the backends.
    """
    settings = request.app.state.settings
    backends = getattr(request.app.state, "backends", None)

    health_status = {
        "status": "ok",
        "deployment_mode": settings.deployment_mode,
        "components": {
            "api": "ready",
            "images": "not configured",
            "contracts": "not configured",
            "orders": "not configured",
            "customers": "not configured",
        },
        "ready": False,
    }

    if backends is not None:
        for component in ("images", "contracts", "orders", "customers"):
            collaborator = getattr(backends, component)
            health_status["components"][component] = f"ready ({type(collaborator).__name__}:{collaborator.name})"
    else:
        health_status["status"] = "degraded"

    health_status["ready"] = all(
        value.startswith("ready") for value in health_status["components"].values()
    )
    return health_status
