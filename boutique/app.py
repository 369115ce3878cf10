# module boutique.app
from boutique.app_setup.factory import create_app
from boutique.app_setup.services import build_services

# App globale
app = create_app(build_services())
