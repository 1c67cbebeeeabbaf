"""
Gemini Service

Genera el análisis narrativo mensual de un refrigerador a partir de las
estadísticas ya agregadas (mañana/tarde) y las observaciones del usuario.

Funciones principales:
- init_gemini(): Configura el SDK de Gemini (nunca rompe el arranque)
- render_fridge_analysis_prompt(): Arma el prompt con el motor de templates de Django
- generate_fridge_analysis(): Llama al modelo y devuelve los cuatro textos

El texto devuelto por el modelo no se interpreta: se entrega tal cual.
"""

import json
import logging
from typing import Any, Dict, Optional

import google.generativeai as genai
from django.conf import settings
from django.template import Context, Template

logger = logging.getLogger(__name__)

GEMINI_READY = False

ANALYSIS_FIELDS = (
    'temperatureStability',
    'potentialReagentRisks',
    'maintenanceRecommendations',
    'overallAssessment',
)

FRIDGE_ANALYSIS_PROMPT = """{% load l10n %}{% autoescape off %}{% localize off %}You are a laboratory equipment specialist, an expert in industrial fridge maintenance and reagent storage.
Analyze the provided temperature log data and user observations for a reagent storage fridge for the month of {{ monthYear }}.

Temperature Data:
Morning Readings ({{ morning.count }} days with readings):
- Average: {% if morning.average is not None %}{{ morning.average }}°C{% else %}N/A{% endif %}
- Minimum: {% if morning.min is not None %}{{ morning.min }}°C{% else %}N/A{% endif %}
- Maximum: {% if morning.max is not None %}{{ morning.max }}°C{% else %}N/A{% endif %}

Evening Readings ({{ evening.count }} days with readings):
- Average: {% if evening.average is not None %}{{ evening.average }}°C{% else %}N/A{% endif %}
- Minimum: {% if evening.min is not None %}{{ evening.min }}°C{% else %}N/A{% endif %}
- Maximum: {% if evening.max is not None %}{{ evening.max }}°C{% else %}N/A{% endif %}

User Observations:
{% if observations %}{{ observations }}{% else %}No specific observations provided.{% endif %}

Based on this information, provide a structured analysis covering the following:
1. Temperature Stability: Assess the stability. Are the fluctuations within acceptable limits for reagent storage? Is there a significant difference between min/max temperatures?
2. Potential Reagent Risks: Identify any potential risks to reagents. Common refrigerated reagents require a 2-8°C range. Highlight any deviations or concerning patterns.
3. Maintenance Recommendations: Suggest actionable maintenance based on the data and observations (e.g., defrosting, seal checks, thermostat calibration).
4. Overall Assessment: Give a concise summary of the fridge's performance for the month.

Respond only with a JSON object with the string fields "temperatureStability", "potentialReagentRisks", "maintenanceRecommendations" and "overallAssessment". Be specific and practical in your advice.
{% endlocalize %}{% endautoescape %}"""


class AnalysisError(Exception):
    """El modelo no devolvió un análisis válido"""


class AnalysisUnavailable(AnalysisError):
    """Gemini no está configurado"""


def init_gemini() -> bool:
    """
    Configura Gemini de forma segura.

    Returns:
        bool: True si Gemini quedó listo
    """
    global GEMINI_READY

    if GEMINI_READY:
        return True

    if not getattr(settings, 'GEMINI_API_KEY', None):
        logger.warning("GEMINI_API_KEY no configurada - análisis IA deshabilitado")
        return False

    genai.configure(api_key=settings.GEMINI_API_KEY)
    GEMINI_READY = True
    logger.info("Gemini AI habilitado")
    return True


def get_gemini_model(model_name: Optional[str] = None):
    """
    Retorna un GenerativeModel configurado.

    Raises:
        AnalysisUnavailable: Si Gemini no está configurado
    """
    if not init_gemini():
        raise AnalysisUnavailable("Gemini no está configurado")

    name = model_name or getattr(settings, 'GEMINI_MODEL', None) or 'gemini-1.5-flash'
    return genai.GenerativeModel(name)


def render_fridge_analysis_prompt(
    month_year: str,
    morning_stats: Dict[str, Any],
    evening_stats: Dict[str, Any],
    observations: Optional[str] = None,
) -> str:
    """Arma el prompt de análisis con las estadísticas del mes"""
    return Template(FRIDGE_ANALYSIS_PROMPT).render(Context({
        'monthYear': month_year,
        'morning': morning_stats,
        'evening': evening_stats,
        'observations': (observations or '').strip(),
    }))


def _strip_code_fence(text: str) -> str:
    text = text.strip()
    if text.startswith('```'):
        text = text.split('\n', 1)[1] if '\n' in text else ''
        if text.rstrip().endswith('```'):
            text = text.rstrip()[:-3]
    return text.strip()


def parse_analysis_response(text: Optional[str]) -> Dict[str, str]:
    """
    Extrae los cuatro campos del análisis de la respuesta del modelo.

    Raises:
        AnalysisError: Si la respuesta no es JSON o le falta algún campo
    """
    if not text:
        raise AnalysisError("El modelo no devolvió una respuesta")

    try:
        data = json.loads(_strip_code_fence(text))
    except json.JSONDecodeError as e:
        raise AnalysisError(f"Respuesta del modelo no es JSON válido: {e}")

    if not isinstance(data, dict):
        raise AnalysisError("Respuesta del modelo no es un objeto JSON")

    missing = [name for name in ANALYSIS_FIELDS if not isinstance(data.get(name), str)]
    if missing:
        raise AnalysisError(f"Faltan campos en el análisis: {', '.join(missing)}")

    return {name: data[name] for name in ANALYSIS_FIELDS}


def generate_fridge_analysis(
    month_year: str,
    morning_stats: Dict[str, Any],
    evening_stats: Dict[str, Any],
    observations: Optional[str] = None,
    model=None,
) -> Dict[str, str]:
    """
    Genera el análisis narrativo del mes.

    Args:
        month_year: Mes analizado (ej: "June 2025")
        morning_stats: {'average', 'min', 'max', 'count'} de las mañanas
        evening_stats: {'average', 'min', 'max', 'count'} de las tardes
        observations: Observaciones libres del usuario

    Returns:
        Dict con temperatureStability, potentialReagentRisks,
        maintenanceRecommendations y overallAssessment

    Raises:
        AnalysisUnavailable: Si Gemini no está configurado
        AnalysisError: Si la respuesta del modelo no es válida
    """
    model = model or get_gemini_model()
    prompt = render_fridge_analysis_prompt(month_year, morning_stats, evening_stats, observations)

    logger.info(f"Solicitando análisis IA para {month_year}")
    response = model.generate_content(
        prompt,
        generation_config={'response_mime_type': 'application/json'},
    )

    try:
        text = response.text
    except ValueError as e:
        # respuesta bloqueada o sin candidatos
        raise AnalysisError(f"El modelo no devolvió texto: {e}")

    return parse_analysis_response(text)
