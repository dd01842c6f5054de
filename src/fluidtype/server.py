import logging
import setproctitle
from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field
import uvicorn

from . import page
from .config import load_config, initial_model
from .errors import InvalidModelError, MalformedInputError
from .generator import compute_scale, generate_model
from .importer import parse
from .model import Breakpoint, Token, TypographyModel

logger = logging.getLogger(__name__)

config = load_config()

# global session model, replaced wholesale by PUT /api/model and imports
session_model: TypographyModel = initial_model(config)


# ##################################################################
# lifespan
# resets the session model on startup and logs where the editor lives
@asynccontextmanager
async def lifespan(_app: FastAPI):
    global session_model
    session_model = initial_model(config)
    logger.info("fluidtype editor at http://%s:%s/", config["host"], config["port"])
    yield


app = FastAPI(title="Fluid Typography", lifespan=lifespan)


# ##################################################################
# pydantic model for import request
class ImportRequest(BaseModel):
    css: str
    base_rem_px: float | None = Field(default=None, gt=0)
    apply: bool = True


# ##################################################################
# pydantic model for add token request
class AddTokenRequest(BaseModel):
    name: str


# ##################################################################
# pydantic model for add breakpoint request
class AddBreakpointRequest(BaseModel):
    value: float = Field(gt=0)
    id: str | None = None


# ##################################################################
# pydantic model for import response
class ImportResponse(BaseModel):
    tokens: list[Token]
    breakpoints: list[Breakpoint] | None
    applied: bool


# ##################################################################
# root endpoint
# serves the editor page with live preview of the session model
@app.get("/", response_class=HTMLResponse)
async def root():
    return page.render(session_model)


# ##################################################################
# health endpoint
# returns simple status for health checks and test fixtures
@app.get("/health")
async def health():
    return {"status": "ok"}


# ##################################################################
# get model
# returns the current session model
@app.get("/api/model")
async def get_model() -> TypographyModel:
    return session_model


# ##################################################################
# replace model
# swaps the session model for a validated replacement
@app.put("/api/model")
async def put_model(model: TypographyModel) -> TypographyModel:
    global session_model
    session_model = model
    return session_model


# ##################################################################
# add token
# appends a token with default sizes at every breakpoint
@app.post("/api/model/tokens")
async def add_token(request: AddTokenRequest) -> Token:
    if not request.name:
        raise HTTPException(status_code=400, detail="Token name must not be empty")
    return session_model.add_token(request.name)


# ##################################################################
# remove token
# deletes a token by its id
@app.delete("/api/model/tokens/{token_id}")
async def remove_token(token_id: str):
    if not session_model.remove_token(token_id):
        raise HTTPException(status_code=404, detail=f"Token not found: {token_id}")
    return {"id": token_id, "removed": True}


# ##################################################################
# add breakpoint
# adds a breakpoint and seeds token cells for it
@app.post("/api/model/breakpoints")
async def add_breakpoint(request: AddBreakpointRequest) -> Breakpoint:
    try:
        return session_model.add_breakpoint(request.value, request.id)
    except InvalidModelError as e:
        raise HTTPException(status_code=400, detail=str(e))


# ##################################################################
# remove breakpoint
# deletes a breakpoint and its per-token values
@app.delete("/api/model/breakpoints/{breakpoint_id}")
async def remove_breakpoint(breakpoint_id: str):
    if not session_model.remove_breakpoint(breakpoint_id):
        raise HTTPException(status_code=404, detail=f"Breakpoint not found: {breakpoint_id}")
    return {"id": breakpoint_id, "removed": True}


# ##################################################################
# generate css
# compiles the posted model, or the session model, into properties and mixins
@app.post("/api/generate")
async def generate_css(model: TypographyModel | None = None):
    try:
        properties, mixins = generate_model(model if model is not None else session_model)
    except InvalidModelError as e:
        logger.info("generate rejected: %s", e)
        raise HTTPException(status_code=400, detail=str(e))
    return {"properties": properties, "mixins": mixins}


# ##################################################################
# import css
# recovers tokens from stylesheet text and optionally applies them
@app.post("/api/import")
async def import_css(request: ImportRequest) -> ImportResponse:
    base = request.base_rem_px or session_model.base_rem_px
    try:
        result = parse(request.css, base)
    except MalformedInputError as e:
        logger.info("import rejected: %s", e)
        raise HTTPException(status_code=400, detail=str(e))

    if request.apply:
        session_model.replace(result)
        logger.info("imported %d tokens into session model", len(result.tokens))

    return ImportResponse(tokens=result.tokens, breakpoints=result.breakpoints, applied=request.apply)


# ##################################################################
# preview
# evaluates every token's font-size and line-height at a viewport width
@app.get("/api/preview")
async def preview(width: float = Query(gt=0)):
    ordered = session_model.sorted_breakpoints()
    ids = [bp.id for bp in ordered]
    px = [bp.value for bp in ordered]
    base = session_model.base_rem_px
    tokens = []
    try:
        for token in session_model.tokens:
            scale = compute_scale(token, base, ids, px)
            tokens.append({
                "name": token.name,
                "font_size_px": round(scale.size_at(width) * base, 3),
                "line_height": scale.line_height_at(width),
            })
    except InvalidModelError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"width": width, "tokens": tokens}


# ##################################################################
# main
# starts the uvicorn server with configured host and port
def main():
    logging.basicConfig(level=logging.INFO)
    setproctitle.setproctitle("fluidtype-server")
    uvicorn.run(app, host=config["host"], port=config["port"])


# ##################################################################
# entry point
# standard python dispatch for main
if __name__ == "__main__":
    main()
