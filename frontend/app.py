"""Streamlit frontend for mailblocks.

Pick a system template or paste legacy template source, edit test values,
preview the rendered email and download preserved markup or generated
source. Talks to the HTTP API only.
"""

import json
import logging
from typing import Any

import httpx
import streamlit as st
import streamlit.components.v1 as components

from mailblocks.core.config import Settings

# Configuration
API_BASE_URL = Settings().api_base_url

# Page config
st.set_page_config(
    page_title="mailblocks",
    page_icon="✉️",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


# =============================================================================
# API Client
# =============================================================================


class APIClient:
    """Thin synchronous client for the mailblocks API."""

    def __init__(self, base_url: str, timeout: float = 10.0):
        """Initialize the API client.

        Args:
            base_url: Base URL of the API.
            timeout: Request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any] | None:
        url = f"{self.base_url}{path}"
        try:
            response = httpx.request(method, url, timeout=self.timeout, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"Request to {url} failed: {e}")
            st.error(f"API unreachable: {e}")
            return None

        if response.status_code >= 400:
            logger.error(f"{method} {path} failed: {response.status_code} - {response.text}")
            detail = response.json().get("detail", response.text) if response.content else ""
            st.error(f"{method} {path} failed ({response.status_code}): {detail}")
            return None
        return response.json()

    def list_templates(self) -> list[dict[str, Any]]:
        data = self._request("GET", "/templates")
        return data["templates"] if data else []

    def get_template(self, slug: str) -> dict[str, Any] | None:
        return self._request("GET", f"/templates/{slug}")

    def render(self, template: dict[str, Any], variables: dict[str, str], mode: str) -> dict[str, Any] | None:
        return self._request(
            "POST", "/templates/render", json={"template": template, "variables": variables, "mode": mode}
        )

    def validate(self, template: dict[str, Any]) -> dict[str, Any] | None:
        return self._request("POST", "/templates/validate", json={"template": template})

    def import_source(self, source: str) -> dict[str, Any] | None:
        return self._request("POST", "/templates/import", json={"source": source})

    def export(self, template: dict[str, Any]) -> dict[str, Any] | None:
        return self._request("POST", "/templates/export", json={"template": template})

    def health_check(self) -> bool:
        """Check if the API is healthy.

        Returns:
            True if API is healthy, False otherwise.
        """
        try:
            response = httpx.get(f"{self.base_url}/health", timeout=5.0)
        except httpx.HTTPError:
            return False
        return response.status_code == 200


# =============================================================================
# UI Components
# =============================================================================


def render_sidebar(client: APIClient) -> None:
    """Render the sidebar with connection status and the template picker."""
    with st.sidebar:
        st.title("✉️ mailblocks")

        if client.health_check():
            st.success("✅ API Connected")
        else:
            st.error("❌ API Disconnected")
            st.info(f"API URL: {API_BASE_URL}")

        st.divider()

        st.subheader("System templates")
        templates = client.list_templates()
        options = {f"{t['name']} ({t['slug']})": t["slug"] for t in templates}
        choice = st.selectbox("Template", list(options), index=None, placeholder="Pick a template")
        if choice and st.button("Load", use_container_width=True):
            template = client.get_template(options[choice])
            if template:
                st.session_state["template"] = template
                st.session_state["values"] = {}
                st.rerun()

        st.divider()
        st.caption(f"API: `{API_BASE_URL}`")


def render_import_section(client: APIClient) -> None:
    """Paste legacy source and convert it to a block model."""
    st.subheader("📥 Import legacy source")
    source = st.text_area("Template module source", height=240, label_visibility="collapsed")
    if not st.button("Import", type="primary", disabled=not source.strip()):
        return

    result = client.import_source(source)
    if result is None:
        return
    for warning in result.get("warnings", []):
        st.warning(warning)
    for error in result.get("errors", []):
        st.error(error["message"])
    if result.get("template"):
        st.session_state["template"] = result["template"]
        st.session_state["values"] = {}
        st.success(f"Imported {len(result['template']['blocks'])} blocks")


def render_values_editor(template: dict[str, Any]) -> dict[str, str]:
    """Edit test values for every declared variable."""
    st.subheader("🧪 Test values")
    values: dict[str, str] = st.session_state.setdefault("values", {})
    for variable in template.get("variables", []):
        name = variable["name"]
        values[name] = st.text_input(
            f"{variable['label']} `{{{{{name}}}}}`",
            value=values.get(name, variable.get("exampleValue", "")),
            key=f"value-{name}",
        )
    return values


def render_preview(client: APIClient, template: dict[str, Any]) -> None:
    """Render the template and show the preview, issues and downloads."""
    values = render_values_editor(template)
    mode = st.radio("Mode", ["substitute", "preserve"], horizontal=True)

    result = client.render(template, values, mode)
    if result is None:
        return

    st.subheader(f"📧 {result['subject']}")
    if result["unresolved_variables"]:
        st.warning(f"Unresolved: {', '.join(result['unresolved_variables'])}")
    components.html(result["html"], height=800, scrolling=True)

    validation = client.validate(template)
    if validation:
        for issue in validation["errors"]:
            st.error(f"{issue.get('blockId') or 'template'}: {issue['message']}")
        for issue in validation["warnings"]:
            st.warning(f"{issue.get('blockId') or 'template'}: {issue['message']}")

    col1, col2, col3 = st.columns(3)
    with col1:
        st.download_button(
            "Download markup",
            data=result["html"],
            file_name=f"{template['slug']}.html",
            mime="text/html",
        )
    with col2:
        exported = client.export(template)
        if exported:
            st.download_button(
                "Download source",
                data=exported["source"],
                file_name=exported["filename"],
                mime="text/plain",
            )
    with col3:
        st.download_button(
            "Download block model",
            data=json.dumps(template, indent=2, ensure_ascii=False),
            file_name=f"{template['slug']}.json",
            mime="application/json",
        )


# =============================================================================
# Main App
# =============================================================================


def main() -> None:
    """Main application entry point."""
    client = APIClient(API_BASE_URL)

    render_sidebar(client)

    st.title("Email Template Workbench")

    tab1, tab2 = st.tabs(["Preview & Export", "Import"])

    with tab1:
        template = st.session_state.get("template")
        if template is None:
            st.info("Load a system template from the sidebar or import legacy source.")
        else:
            render_preview(client, template)

    with tab2:
        render_import_section(client)


if __name__ == "__main__":
    main()
