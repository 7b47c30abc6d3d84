# ============================================================================
# SERVICES MODULE
# ============================================================================
# EPOCH: 1 - CONTROL FLOW
# STATUS: Service layer
# PURPOSE: Blueprint loading and entity tree construction
# CREATED: 18 OCT 2026
# ============================================================================
"""
Services Module

Usage:
    from services import BlueprintService

    service = BlueprintService()
    app = service.build(service.get_or_raise("conditional_restart"), mgmt)
"""

from .blueprint_service import BlueprintService

__all__ = ["BlueprintService"]
