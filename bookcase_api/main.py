import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from bookcase_api.core import config
from bookcase_api.database import init_db
from bookcase_api.routes import application_routes, auth_routes, client_routes, exam_routes, major_routes

logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title='Bookcase API')

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)


@app.on_event('startup')
def initialize_database() -> None:
    config.validate_runtime_config()
    try:
        init_db()
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL and database credentials.')


@app.get('/')
def root():
    return {'status': 'Bookcase API Running'}


app.include_router(auth_routes.router, prefix='/auth')
app.include_router(client_routes.router, prefix='/clients')
app.include_router(major_routes.router, prefix='/majors')
app.include_router(exam_routes.router, prefix='/exams')
app.include_router(application_routes.router, prefix='/applications')
