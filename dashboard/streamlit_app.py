"""Turismo e Hipotecas — Streamlit interactive dashboard."""

from __future__ import annotations

import logging

import streamlit as st

from app.pipeline import DashboardData, load_dashboard_data, render_map
from app.processing.transformer import (
    available_years,
    community_options,
    grouped_comparison,
    monthly_rates,
    quarter_series,
    yearly_averages,
    yearly_income_mortgages,
)
from app.rendering.choropleth import format_total
from app.rendering.figures import MONTH_NAMES, dual_axis_figure, grouped_bar_figure, scene_figure
from app.schemas import Filters
from dashboard.geo import MAP_PAGES

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

st.set_page_config(
    page_title="Turismo e Hipotecas — Dashboard de Datos",
    page_icon="🗺️",
    layout="wide",
    initial_sidebar_state="expanded",
)


@st.cache_data(show_spinner="Cargando datos...")
def get_data() -> DashboardData:
    return load_dashboard_data()


def month_year_sliders(key: str, month: int, year: int, year_range: tuple[int, int]) -> Filters:
    """Month and year sliders, returned as validated filters."""
    st.subheader("Seleccionar Fecha")
    month = st.slider("Mes", 1, 12, month, key=f"{key}_month")
    st.caption(f"Mes: {MONTH_NAMES[month - 1]}")
    year = st.slider("Año", year_range[0], year_range[1], year, key=f"{key}_year")
    return Filters(month=month, year=year)


# ---------------------------------------------------------------------------
# Sidebar
# ---------------------------------------------------------------------------

st.sidebar.title("🗺️ Dashboard de Datos")
st.sidebar.markdown("**Turismo y mercado hipotecario en España**")
st.sidebar.markdown("---")

page = st.sidebar.radio(
    "Navegación",
    [
        "Inicio",
        "Mapa por provincias",
        "Mapa por comunidades",
        "Extranjeros vs hipotecas",
        "Serie temporal extranjeros",
        "PIB vs hipotecas",
        "Hipotecas vs tipo de interés",
        "Hipotecas vs renta media",
    ],
)

st.sidebar.markdown("---")
st.sidebar.caption("Fuente: [Instituto Nacional de Estadística (INE)](https://www.ine.es)")


# ---------------------------------------------------------------------------
# Page: Inicio
# ---------------------------------------------------------------------------

def page_home(_data: DashboardData):
    st.title("Relación entre el Turismo y el Mercado Hipotecario en España")
    st.markdown(
        "Análisis de la influencia de la llegada de turistas en el precio medio de las hipotecas."
    )
    st.markdown("---")
    st.markdown(
        "**Introducción:** España ha experimentado un crecimiento récord en la llegada de "
        "turistas internacionales, mientras que el mercado hipotecario muestra un incremento "
        "en el precio medio de las hipotecas. Este proyecto analiza la posible correlación "
        "entre ambos fenómenos."
    )
    st.markdown(
        "**Ampliación de datos:** se incorporan los tipos de interés, el PIB y la renta "
        "media para estudiar si el importe de las hipotecas se relaciona con el precio de "
        "la vivienda."
    )
    st.markdown(
        "**Metodología:** datos oficiales del INE, "
        "[FRONTUR/Egatur](https://www.ine.es/dyngs/Prensa/es/FRONTUR1124.htm) para el turismo e "
        "[Hipotecas](https://www.ine.es/dyngs/Prensa/es/H0924.htm) para el mercado hipotecario."
    )


# ---------------------------------------------------------------------------
# Map pages
# ---------------------------------------------------------------------------

def page_map(data: DashboardData, mode: str):
    config = MAP_PAGES[mode]
    observations = data.observations_for(mode)

    st.title(config.title)
    headline = st.empty()
    map_col, control_col = st.columns([3, 1])
    with control_col:
        filters = month_year_sliders(mode, config.default_month, config.default_year, config.year_range)

    def select(selection):
        st.session_state[config.selection_key] = selection

    view = render_map(mode, filters, data.geometries[mode], observations, on_click=select)
    scene = view.scene

    headline.markdown(f"### Número de viviendas turísticas: **{format_total(view.total)}**")

    with map_col:
        if not view.points:
            st.info("No hay datos para el periodo seleccionado.")
        event = st.plotly_chart(
            scene_figure(scene),
            use_container_width=True,
            on_select="rerun",
            selection_mode="points",
            key=f"map_{mode}",
        )

    for point in (event.selection.points if event else []):
        index = point.get("customdata")
        if isinstance(index, list):
            index = index[0] if index else None
        if index is not None:
            scene.activate(int(index))

    selected = scene.resolve_selection(st.session_state.get(config.selection_key))
    st.session_state[config.selection_key] = selected
    with control_col:
        if selected is not None:
            st.subheader(f"{selected.name} – Total: {format_total(selected.total)}")
        else:
            st.subheader(config.prompt)


# ---------------------------------------------------------------------------
# Page: Extranjeros vs hipotecas
# ---------------------------------------------------------------------------

def page_grouped(data: DashboardData):
    st.title("Comparación de Extranjeros y nº Hipotecas")
    df = data.datasets["extranjeros_hipotecas"]

    chart_col, control_col = st.columns([3, 1])
    with control_col:
        community = st.selectbox("Comunidad Autónoma", community_options(df, "Comunidades"))
        filters = month_year_sliders("grouped", 10, 2016, (2015, 2024)).model_copy(update={"region": community})

    grouped = grouped_comparison(df, filters.month, filters.year, filters.region)
    with chart_col:
        if grouped.empty:
            st.info("No hay datos para la selección actual.")
            return
        st.plotly_chart(grouped_bar_figure(grouped), use_container_width=True)


def page_timeseries(data: DashboardData):
    st.title("Serie Temporal de Extranjeros e Hipotecas")
    df = data.datasets["extranjeros_hipotecas"]

    chart_col, control_col = st.columns([3, 1])
    with control_col:
        community = st.selectbox("Comunidad Autónoma", community_options(df, "Comunidades"))

    filters = Filters(region=community)
    series = yearly_averages(df, filters.region)
    with chart_col:
        if series.empty:
            st.info(f"No hay datos para la comunidad {community}")
            return
        fig = dual_axis_figure(
            series,
            x="year",
            left=("tourism", "Turistas (media)", "red"),
            right=("mortgages", "Hipotecas (media)", "green"),
            title="Promedio anual de turistas extranjeros e hipotecas",
        )
        st.plotly_chart(fig, use_container_width=True)


# ---------------------------------------------------------------------------
# Page: PIB vs hipotecas
# ---------------------------------------------------------------------------

def page_gdp(data: DashboardData):
    st.title("Serie Temporal Normalizada de PIB y Hipotecas")
    quarter = st.slider("Trimestre", 1, 4, 1)
    filters = Filters(quarter=quarter)

    series = quarter_series(data.datasets["pib_hipotecas"], filters.quarter)
    if series.empty:
        st.info(f"No hay datos para el trimestre {filters.quarter}")
        return
    fig = dual_axis_figure(
        series,
        x="year",
        left=("gdp", "PIB normalizado (M)", "blue"),
        right=("mortgages", "Hipotecas normalizadas", "red"),
        title=f"PIB e hipotecas — trimestre {filters.quarter}",
    )
    st.plotly_chart(fig, use_container_width=True)


# ---------------------------------------------------------------------------
# Page: Hipotecas vs tipo de interés
# ---------------------------------------------------------------------------

def page_interest(data: DashboardData):
    st.title("Hipotecas vs Tipo de Interés por Mes")
    df = data.datasets["hipotecas_tipo_interes"]
    years = available_years(df, "Anio")
    if not years:
        st.warning("No hay datos de hipotecas y tipo de interés.")
        return
    year = st.selectbox("Año", years, index=0)

    series = monthly_rates(df, year)
    if series.empty:
        st.error(f"No hay datos para el año {year}")
        return
    series = series.assign(month_name=[MONTH_NAMES[int(m) - 1] for m in series["month"]])
    fig = dual_axis_figure(
        series,
        x="month_name",
        left=("mortgages", "Hipotecas (nacional)", "green"),
        right=("interest_rate", "Tipo de interés (%)", "red"),
        title=f"Hipotecas y tipo de interés — {year}",
        x_title="Mes",
    )
    st.plotly_chart(fig, use_container_width=True)


# ---------------------------------------------------------------------------
# Page: Hipotecas vs renta media
# ---------------------------------------------------------------------------

def page_income(data: DashboardData):
    st.title("Hipotecas Anuales vs Renta Media por Año")
    df = data.datasets["hipotecas_renta"]
    community = st.selectbox("Comunidad Autónoma", community_options(df, "Comunidades_Autonomas"))

    filters = Filters(region=community)
    series = yearly_income_mortgages(df, filters.region)
    if series.empty:
        st.error(f"No hay datos para la comunidad {community}")
        return
    fig = dual_axis_figure(
        series,
        x="year",
        left=("mortgages", "Hipotecas anuales (media)", "green"),
        right=("income", "Renta media", "red"),
        title=f"Hipotecas vs renta media — {community}",
    )
    st.plotly_chart(fig, use_container_width=True)


# ---------------------------------------------------------------------------
# Router
# ---------------------------------------------------------------------------

PAGES = {
    "Inicio": page_home,
    "Mapa por provincias": lambda data: page_map(data, "province"),
    "Mapa por comunidades": lambda data: page_map(data, "community"),
    "Extranjeros vs hipotecas": page_grouped,
    "Serie temporal extranjeros": page_timeseries,
    "PIB vs hipotecas": page_gdp,
    "Hipotecas vs tipo de interés": page_interest,
    "Hipotecas vs renta media": page_income,
}

try:
    dashboard_data = get_data()
except Exception:
    logger.exception("Could not load dashboard data")
    st.error("No se pudieron cargar los datos. Revisa TURISMO_DATA_DIR / TURISMO_DATA_BASE_URL.")
    st.stop()

PAGES[page](dashboard_data)
