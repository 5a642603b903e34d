from fastapi import Request

from fxwidget.core.config import Settings
from fxwidget.db.dal import Database
from fxwidget.services.session import WidgetSession


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_session(request: Request) -> WidgetSession:
    return request.app.state.session


def get_db(request: Request) -> Database:
    return Database(request.app.state.settings.db_path)
