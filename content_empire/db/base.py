from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker, declarative_base

Base = declarative_base()

def make_engine(database_url: str, access_key: str = "", **kwargs) -> Engine:
    url = make_url(database_url)
    if access_key:
        url = url.set(password=access_key)
    connect_args = {"check_same_thread": False} if url.drivername.startswith("sqlite") else {}
    return create_engine(url, connect_args=connect_args, **kwargs)

def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)
