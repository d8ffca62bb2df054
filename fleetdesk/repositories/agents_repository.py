from __future__ import annotations

from typing import List

from fleetdesk.core.supabase import SupabaseClient
from fleetdesk.models.fleet import AgentRecord, parse_records


class AgentsRepository:
    def __init__(self) -> None:
        self.client = SupabaseClient()

    def list_agents(self) -> List[AgentRecord]:
        rows = self.client.select_all(
            table="agents",
            select="id,first_name,last_name,email",
            order="last_name.asc,id.asc",
        )
        return parse_records(AgentRecord, rows)
