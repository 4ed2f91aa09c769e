"""Interactive incident form session."""

from typing import List
from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.history import InMemoryHistory

from .mobile import MobileIncidentForm, SEVERITY_OPTIONS

FIELD_PROMPTS = {
    "incident_title": "Incident title: ",
    "incident_description": "Description: ",
    "incident_severity": "Severity (Low/Medium/High): ",
}


class Session:
    """Prompts for the fields of a mobile incident form."""

    def __init__(self):
        """Initialize a new session."""
        self.history = InMemoryHistory()
        self.prompt_session = PromptSession(history=self.history)
        self.severity_completer = WordCompleter(SEVERITY_OPTIONS, ignore_case=True)
        self.incidents: List[str] = []

    async def get_input(self, prompt: str, **kwargs) -> str:
        """
        Get user input with history.

        Args:
            prompt: Prompt string to display

        Returns:
            User input string
        """
        return await self.prompt_session.prompt_async(prompt, **kwargs)

    async def fill_form(self, form: MobileIncidentForm) -> MobileIncidentForm:
        """
        Prompt for every blank field of the form.

        Returns:
            A new form with the prompted values filled in
        """
        values = form.model_dump()
        for field in form.missing_fields():
            kwargs = {}
            if field == "incident_severity":
                kwargs["completer"] = self.severity_completer
            values[field] = await self.get_input(FIELD_PROMPTS[field], **kwargs)
        return MobileIncidentForm(**values)

    def add_incident(self, incident_id: str):
        """Remember an incident reported in this session."""
        self.incidents.append(incident_id)
