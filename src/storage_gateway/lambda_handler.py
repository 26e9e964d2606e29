"""Lambda handler for the Storage Gateway using Mangum."""
from mangum import Mangum

from storage_gateway.main import create_app

# Collaborators are built once per Lambda container, at cold start
app = create_app()

handler = Mangum(app, lifespan="off")

lambda_handler = handler
