#!/usr/bin/env python3
"""
server.py - Mapping template preview server

FastAPI-based server that renders API Gateway mapping templates against a
sample payload and request context, so templates can be checked without
deploying them.
"""

from typing import Any, Dict

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from vtl_emulator.rendering import VTLProcessor
from vtl_emulator.template import compact_json

VERSION = "1.0.0"

# Initialize FastAPI app
app = FastAPI(title="API Gateway Mapping Template Emulator", version=VERSION)

# Initialize components
processor = VTLProcessor()


class RenderRequest(BaseModel):
    template: str
    input: str = ""
    context: Dict[str, Any] = Field(default_factory=dict)


class RenderResponse(BaseModel):
    result: str


@app.post("/render", response_model=RenderResponse)
async def render_template(request: RenderRequest):
    """
    Render a mapping template.

    Template errors are not HTTP errors: like the gateway console, the
    result then carries an "Error processing template: ..." message.

    Args:
        request: Template, raw request body and context object

    Returns:
        The rendered output
    """
    if not request.template.strip():
        raise HTTPException(status_code=400, detail='Missing "template" in request body.')

    result = processor.process(request.template, request.input, compact_json(request.context))
    return RenderResponse(result=result)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": VERSION}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
