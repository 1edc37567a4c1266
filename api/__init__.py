"""HTTP façade over the FestQuest search and summary services."""
