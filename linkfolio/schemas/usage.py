from pydantic import BaseModel
from typing import Optional


class PlanLimitsResponse(BaseModel):
    plan_name: Optional[str] = None
    max_links: int
    max_pages: int
    max_team_members: int
    max_blocks: int
    max_socials: int
    qr_code_enabled: bool
    analytics_enabled: bool
    custom_templates_enabled: bool
    menu_builder_enabled: bool
    current_links: int
    current_pages: int
    current_blocks: int
    current_socials: int
    current_team_members: int
    has_active_plan: bool
    team_lookup_failed: bool = False

    class Config:
        from_attributes = True
