from govdash.routes.api import register_api_routes


def register_routes(app):
    register_api_routes(app)
