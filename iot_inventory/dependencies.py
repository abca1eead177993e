from fastapi import Request

from iot_inventory.services import Services

def get_db(request: Request):
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()

def get_services(request: Request) -> Services:
    return request.app.state.services
