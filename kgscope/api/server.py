"""
FastAPI Server for the kgscope explorer

Endpoints:
- GET  /api/graph - Render-ready graph for the given inputs
- POST /api/graph - Same, inputs as a JSON body
- GET  /api/graph/stats - Counts for the given inputs
- GET  /api/options - Modules, classes, instances and guided tasks
- GET  /api/legend - Predicate and class display metadata
- GET  /api/constraints - Constraint table
- GET  /api/visualization/{format} - Graph export (d3, mermaid)
"""

import logging
import os
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, PlainTextResponse
from pydantic import BaseModel, Field

from ..config import ENV_PREFIX, ExplorerConfig, load_data
from ..graph.filters import ALL, UnknownClassError, check_class, class_options, instance_options, module_options
from ..graph.guided_tasks import task_options
from ..graph.render_model import RenderModel
from ..graph.visualization import GraphVisualizer
from ..pipeline import PipelineInput, run_pipeline
from ..schema import ConstraintTable, legend
from ..store import TripleStore

logger = logging.getLogger(__name__)

# Import string of the app factory uvicorn uses when reloading.
RELOAD_APP = "kgscope.api.server:app_from_env"


class GraphRequest(BaseModel):
    """Pipeline inputs as accepted over HTTP."""
    module: str = ALL
    class_name: str = ALL
    instance: str = ALL
    query: str = ""
    level: int = Field(1, ge=1, le=2)
    node_limit: int = Field(10, ge=1)
    task: Optional[int] = Field(None, ge=0)
    include_type_edges: bool = False
    settle: bool = True

    def to_input(self) -> PipelineInput:
        return PipelineInput(
            module=self.module,
            class_name=self.class_name,
            instance=self.instance,
            query=self.query,
            level=self.level,
            node_limit=self.node_limit,
            task=self.task,
            include_type_edges=self.include_type_edges,
        )


def create_app(
    store: TripleStore,
    constraints: ConstraintTable,
    config: Optional[ExplorerConfig] = None,
) -> FastAPI:
    """Create FastAPI application.

    Args:
        store: Triple store (read-only for the app's lifetime)
        constraints: Constraint table
        config: Optional configuration (canvas size, input defaults)

    Returns:
        FastAPI application instance
    """
    config = config or ExplorerConfig()

    app = FastAPI(
        title="kgscope Explorer API",
        description="Filtered, laid-out knowledge graph views with constraint checking",
        version="0.1.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.store = store
    app.state.constraints = constraints
    app.state.config = config

    def graph_params(
        module: str = ALL,
        class_name: str = Query(ALL, alias="class"),
        instance: str = ALL,
        query: str = "",
        level: int = Query(config.level, ge=1, le=2),
        node_limit: int = Query(config.node_limit, ge=1),
        task: Optional[int] = Query(None, ge=0),
        include_type_edges: bool = False,
        settle: bool = True,
    ) -> GraphRequest:
        return GraphRequest(
            module=module,
            class_name=class_name,
            instance=instance,
            query=query,
            level=level,
            node_limit=node_limit,
            task=task,
            include_type_edges=include_type_edges,
            settle=settle,
        )

    def render(request: GraphRequest) -> RenderModel:
        try:
            check_class(app.state.store, request.class_name)
            inputs = request.to_input()
        except UnknownClassError as e:
            raise HTTPException(status_code=404, detail=str(e))
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return run_pipeline(
            app.state.store,
            app.state.constraints,
            inputs,
            app.state.config.canvas,
            settle=request.settle,
        )

    @app.get("/", response_class=HTMLResponse)
    async def root():
        """Root endpoint."""
        return "<h1>kgscope Explorer API</h1><p>Use /docs for API documentation</p>"

    @app.get("/api/graph")
    def get_graph(request: GraphRequest = Depends(graph_params)):
        """Render-ready graph for the given inputs.

        An unknown class is a 404, an unknown module or task index a 400.
        """
        return render(request).to_dict()

    @app.post("/api/graph")
    def post_graph(request: GraphRequest):
        """Render-ready graph, inputs as a JSON body. Errors as for GET."""
        return render(request).to_dict()

    @app.get("/api/graph/stats")
    def get_graph_stats(request: GraphRequest = Depends(graph_params)):
        """Counts for the graph the given inputs produce."""
        request.settle = False
        return render(request).stats()

    @app.get("/api/options")
    async def get_options(class_name: str = Query(ALL, alias="class")) -> Dict[str, Any]:
        """Values the presentation layer can offer for each input. An unknown class is a 404."""
        st = app.state.store
        try:
            check_class(st, class_name)
        except UnknownClassError as e:
            raise HTTPException(status_code=404, detail=str(e))
        return {
            "modules": module_options(),
            "classes": class_options(st),
            "instances": instance_options(st, class_name),
            "tasks": task_options(),
            "levels": [1, 2],
        }

    @app.get("/api/legend")
    async def get_legend():
        """Display metadata for predicates and classes."""
        return legend()

    @app.get("/api/constraints")
    async def get_constraints():
        """Constraint table."""
        return app.state.constraints.to_dict()

    @app.get("/api/visualization/{format}")
    def get_visualization(format: str, request: GraphRequest = Depends(graph_params)):
        """Graph export in the specified format."""
        format_lower = format.lower()
        if format_lower not in ("d3", "mermaid"):
            raise HTTPException(
                status_code=400,
                detail=f"Unsupported format: {format}. Supported: d3, mermaid",
            )
        visualizer = GraphVisualizer(render(request), app.state.constraints)
        if format_lower == "d3":
            return visualizer.to_d3_json()
        return PlainTextResponse(visualizer.to_mermaid())

    return app


def app_from_env() -> FastAPI:
    """App factory that loads configuration and data from ``KGSCOPE_*`` variables.

    Used by uvicorn when reloading, since reload needs an import string.
    """
    config = ExplorerConfig.from_env()
    store, constraints = load_data(config)
    return create_app(store, constraints, config)


class KGScopeServer:
    """kgscope API server wrapper class."""

    def __init__(
        self,
        store: TripleStore,
        constraints: ConstraintTable,
        config: Optional[ExplorerConfig] = None,
    ):
        """Initialize API server.

        Args:
            store: Triple store
            constraints: Constraint table
            config: Optional configuration
        """
        self.config = config or ExplorerConfig()
        self.app = create_app(store, constraints, self.config)

    def run(self, host: Optional[str] = None, port: Optional[int] = None, reload: bool = False):
        """Run API server.

        Args:
            host: Host to bind to (default from config)
            port: Port to bind to (default from config)
            reload: Enable auto-reload (development). The reloaded worker
                rebuilds the app with ``app_from_env``, so the dataset is
                passed on through ``KGSCOPE_DATASET``.
        """
        import uvicorn

        host = host or self.config.host
        port = port or self.config.port
        logger.info(f"Starting kgscope API on {host}:{port}")
        if not reload:
            uvicorn.run(self.app, host=host, port=port)
            return
        if self.config.dataset:
            os.environ[ENV_PREFIX + "DATASET"] = self.config.dataset
        uvicorn.run(RELOAD_APP, factory=True, host=host, port=port, reload=True)
