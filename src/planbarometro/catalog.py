"""Built-in assessment models and the catalog that serves them."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable

import structlog

from .config import ConfigManager
from .schemas import AssessmentModel

TOPP_MODEL_ID = "topp"

# Presentation lookups keyed by dimension id.
DIMENSION_STYLES: dict[str, dict[str, str]] = {
    "technical": {"color": "bg-blue-500", "icon": "cog"},
    "operational": {"color": "bg-green-500", "icon": "tools"},
    "political": {"color": "bg-purple-500", "icon": "handshake"},
    "prospective": {"color": "bg-orange-500", "icon": "eye"},
}


def _criterion(criterion_id: str, name: str, *questions: str) -> dict[str, Any]:
    return {
        "id": criterion_id,
        "name": name,
        "elements": [
            {"id": f"{criterion_id}_{index}", "text": text}
            for index, text in enumerate(questions, start=1)
        ],
    }


def _dimension(dimension_id: str, name: str, description: str, criteria: list[dict]) -> dict:
    return {
        "id": dimension_id,
        "name": name,
        "description": description,
        "criteria": criteria,
        **DIMENSION_STYLES.get(dimension_id, {}),
    }


TOPP_DEFINITION: dict[str, Any] = {
    "id": TOPP_MODEL_ID,
    "name": "Capacidades TOPP",
    "description": (
        "Evalúa capacidades Técnicas, Operativas, Políticas y Prospectivas "
        "para gestionar transformaciones."
    ),
    "dimensions": [
        _dimension(
            "technical",
            "Capacidad Técnica",
            "Analizar el grado de disponibilidad y uso de evidencia, conocimiento "
            "experto y herramientas técnicas en la gestión pública.",
            [
                _criterion(
                    "t1_1",
                    "Diagnóstico basado en evidencia",
                    "¿El diagnóstico parte de datos validados?",
                    "¿Se consultó evidencia territorializada?",
                ),
                _criterion(
                    "t1_2",
                    "Uso de herramientas analíticas",
                    "¿Se emplean modelos, marcos lógicos, teorías de cambio?",
                ),
                _criterion(
                    "t1_3",
                    "Calidad y disponibilidad de datos",
                    "¿Hay registros administrativos útiles?",
                    "¿Los datos están actualizados?",
                ),
                _criterion(
                    "t1_4",
                    "Capacidad de análisis técnico interno",
                    "¿Existe una unidad técnica con autonomía y formación adecuada?",
                ),
            ],
        ),
        _dimension(
            "operational",
            "Capacidad Operativa",
            "Evaluar si existen los recursos, estructuras y procesos que permiten "
            "implementar políticas públicas de manera efectiva.",
            [
                _criterion(
                    "t2_1",
                    "Claridad de roles y mandatos",
                    "¿Las funciones están normativamente definidas y son operativas?",
                ),
                _criterion(
                    "t2_2",
                    "Recursos humanos suficientes y capacitados",
                    "¿Hay equipos técnicos estables?",
                    "¿Existe baja rotación del personal?",
                ),
                _criterion(
                    "t2_3",
                    "Estructura organizacional habilitante",
                    "¿La estructura facilita coordinación y ejecución?",
                ),
                _criterion(
                    "t2_4",
                    "Capacidad presupuestaria",
                    "¿Se cuenta con financiamiento previsible para implementar decisiones?",
                ),
            ],
        ),
        _dimension(
            "political",
            "Capacidad Política",
            "Medir la capacidad de construir legitimidad, alinear intereses, "
            "coordinar actores y sostener decisiones complejas.",
            [
                _criterion(
                    "t3_1",
                    "Participación de actores clave",
                    "¿Fueron incluidos actores relevantes en el diseño?",
                ),
                _criterion(
                    "t3_2",
                    "Mecanismos de diálogo político",
                    "¿Existen espacios institucionales de negociación?",
                ),
                _criterion(
                    "t3_3",
                    "Alineación entre niveles de gobierno",
                    "¿Los niveles subnacional y nacional actúan coordinadamente?",
                ),
                _criterion(
                    "t3_4",
                    "Liderazgo y voluntad política",
                    "¿Existe respaldo explícito de autoridades a las decisiones técnicas?",
                ),
            ],
        ),
        _dimension(
            "prospective",
            "Capacidad Prospectiva",
            "Examinar la capacidad de anticipar disrupciones, construir visiones "
            "compartidas y orientar el rumbo estratégico de las transformaciones.",
            [
                _criterion(
                    "t4_1",
                    "Construcción de visión compartida",
                    "¿Existe una visión estratégica co-construida a largo plazo?",
                ),
                _criterion(
                    "t4_2",
                    "Escenarios futuros y anticipación",
                    "¿Se han construido escenarios alternativos?",
                    "¿Se consideran disrupciones potenciales?",
                ),
                _criterion(
                    "t4_3",
                    "Mecanismos de revisión iterativa",
                    "¿Se han definido momentos y procesos para actualizar políticas o planes?",
                ),
                _criterion(
                    "t4_4",
                    "Capacidad de aprendizaje institucional",
                    "¿Se documentan aprendizajes y se ajustan políticas a partir de la experiencia?",
                ),
            ],
        ),
    ],
}

# Frameworks announced in the selector whose criteria are not defined yet.
PLACEHOLDER_DEFINITIONS: list[dict[str, Any]] = [
    {
        "id": "nacional",
        "name": "Nacional",
        "description": (
            "Enfoque en instrumentos de gobierno y administración del Estado "
            "para el desarrollo nacional."
        ),
        "dimensions": [],
    },
    {
        "id": "subnacional",
        "name": "Subnacional",
        "description": (
            "Análisis de articulación entre niveles nacional y subnacional de "
            "planificación."
        ),
        "dimensions": [],
    },
]


class ModelCatalog:
    """Registry of assessment models, keyed by model id."""

    def __init__(self, models: Iterable[AssessmentModel] | None = None):
        self._models: dict[str, AssessmentModel] = {}
        self._logger = structlog.get_logger(__name__)
        for model in models if models is not None else default_models():
            self.register(model)

    def register(self, model: AssessmentModel) -> None:
        if model.id in self._models:
            self._logger.info("catalog.model_replaced", model_id=model.id)
        self._models[model.id] = model

    def get(self, model_id: str) -> AssessmentModel:
        try:
            return self._models[model_id]
        except KeyError as exc:
            raise KeyError(f"Unknown assessment model: {model_id!r}") from exc

    def models(self) -> list[AssessmentModel]:
        return list(self._models.values())

    def load_directory(self, path: str | Path) -> list[str]:
        """Register every YAML model definition found under ``path``."""
        manager = ConfigManager(path)
        loaded: list[str] = []
        for name in manager.available():
            model = AssessmentModel.model_validate(manager.load(name))
            self.register(model)
            loaded.append(model.id)
        self._logger.info("catalog.directory_loaded", path=str(path), models=loaded)
        return loaded


def default_models() -> list[AssessmentModel]:
    return [
        AssessmentModel.model_validate(definition)
        for definition in (TOPP_DEFINITION, *PLACEHOLDER_DEFINITIONS)
    ]


def build_catalog(models_dir: str | Path | None = None) -> ModelCatalog:
    catalog = ModelCatalog()
    if models_dir:
        catalog.load_directory(models_dir)
    return catalog
