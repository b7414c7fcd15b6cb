from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from content_scheduler.config import cors_origins
from content_scheduler.db import init_db
from content_scheduler.routes import router

logging.basicConfig(level=logging.INFO)


@asynccontextmanager
async def lifespan(_app: FastAPI):
  init_db()
  yield


app = FastAPI(title="Content Scheduler", lifespan=lifespan)

if cors_origins:
  app.add_middleware(CORSMiddleware,
                     allow_origins=cors_origins,
                     allow_methods=["*"],
                     allow_headers=["*"])

app.include_router(router)
