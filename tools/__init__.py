# ============================================================================
# TOOLS
# ============================================================================
# EPOCH: 1 - CONTROL FLOW
# STATUS: Tools - Command-line utilities
# PURPOSE: Local runners for blueprints
# CREATED: 18 OCT 2026
# ============================================================================
