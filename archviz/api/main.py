from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional

from archviz.config import load_settings
from archviz.core.analysis import CrateAnalysis, merge_all
from archviz.diagrams.mermaid import DiagramType
from archviz.graph.code_graph import ArchitectureGraph
from archviz.graph.extractor import analyze_relationships
from archviz.loader import ModelFormatError, analysis_from_data

# --- CONFIGURATION ---
settings = load_settings()
generator = settings.create_generator()

app = FastAPI(
    title="archviz",
    description="Architecture diagrams from structural crate models",
    version="0.1.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


class ModelsRequest(BaseModel):
    """One serialized CrateAnalysis per translation unit."""
    models: List[Dict[str, Any]] = Field(..., min_length=1)
    name: Optional[str] = None


class DiagramRequest(ModelsRequest):
    diagram: DiagramType = settings.diagram
    raw: bool = settings.raw


def _build_analysis(request: ModelsRequest) -> CrateAnalysis:
    try:
        analyses = analysis_from_data(request.models, "request")
    except ModelFormatError as e:
        raise HTTPException(status_code=422, detail=str(e))

    name = request.name or analyses[0].name
    return analyze_relationships(merge_all(name, analyses))


# --- ENDPOINTS ---

@app.get("/")
def health_check():
    return {
        "status": "active",
        "system": "archviz",
        "diagrams": [d.value for d in DiagramType]
    }


@app.post("/analyze")
def analyze(request: DiagramRequest):
    """Merge, analyze and render one diagram view."""
    analysis = _build_analysis(request)
    return {
        "name": analysis.name,
        "diagram_type": request.diagram.value,
        "diagram": generator.render(analysis, request.diagram, raw=request.raw),
        "statistics": analysis.statistics()
    }


@app.post("/analysis")
def analysis_json(request: ModelsRequest):
    """Merge and analyze; return the full model with its relationships."""
    analysis = _build_analysis(request)
    graph = ArchitectureGraph.from_analysis(analysis)
    return {
        "analysis": analysis.to_dict(),
        "dangling_targets": graph.dangling_targets(),
        "module_cycles": graph.find_module_cycles()
    }
