"""AWS Lambda entry point.

Mangum adapts API Gateway events to ASGI so the endpoint gateway runs on
Lambda without changes. Lifespan is off, so the model fetcher's HTTP client
lives as long as the warm container.
"""

from mangum import Mangum

from endpoint_gateway.main import app

handler = Mangum(app, lifespan="off")
