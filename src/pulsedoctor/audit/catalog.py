# Built-in module catalog for the civic platform.
# Created: 2026-10-18
#
# Each entry: (name, route, component, priority, category).
# Editing this list is a configuration change; see ModuleRegistry.from_file()
# for loading a catalog from JSON instead.

from __future__ import annotations

CORE_MODULES: list[tuple[str, str | None, str | None, str, str]] = [
    # Core pages
    ("Homepage", "/", "Index", "critical", "page"),
    ("Authentication", "/auth", "Auth", "critical", "page"),
    ("Admin Panel", "/admin", "Admin", "critical", "page"),
    ("Pulse Feed", "/pulse", "PulseFeed", "high", "page"),
    ("Politicians Directory", "/politicians", "Politicians", "high", "page"),
    ("Political Parties", "/political-parties", "PoliticalParties", "high", "page"),
    ("News Feed", "/news", "News", "high", "page"),
    ("Marketplace", "/marketplace", "Marketplace", "medium", "page"),
    ("Polls", "/polls", "Polls", "medium", "page"),
    ("Donations", "/donate", "Donations", "medium", "page"),
    ("Social Hub", "/social", "Social", "medium", "page"),
    ("Security Center", "/security", "Security", "high", "page"),
    ("Politica AI", "/politica-ai", "PoliticaAI", "high", "page"),
    (
        "CamerPulse Intelligence",
        "/camerpulse-intelligence",
        "CamerPulseIntelligence",
        "high",
        "page",
    ),
    ("Civic Portal", "/civic-portal", "CivicPublicPortal", "high", "page"),
    ("Promises Tracker", "/promises", "Promises", "medium", "page"),
    ("Regional Analytics", "/regional-analytics", "RegionalAnalytics", "high", "page"),
    # Core components
    ("App Layout", None, "AppLayout", "critical", "component"),
    ("Header Navigation", None, "Header", "critical", "component"),
    ("Mobile Navigation", None, "MobileNavigation", "high", "component"),
    ("Theme Management", None, "ThemeManagement", "medium", "component"),
    ("Dark Mode Toggle", None, "DarkModeToggle", "low", "component"),
    # AI features
    ("Civic Alert Bot", None, "CivicAlertBot", "high", "feature"),
    ("Sentiment Tracker", None, "LocalSentimentMapper", "high", "feature"),
    ("Trend Radar", None, "TrendRadar", "medium", "feature"),
    ("Emotional Spotlight", None, "EmotionalSpotlight", "medium", "feature"),
    ("Civic Trust Index", None, "CivicTrustIndex", "medium", "feature"),
    ("Daily Report Generator", None, "DailyReportGenerator", "medium", "feature"),
    ("Disinformation Shield", None, "DisinfoShieldAI", "high", "feature"),
    ("Election Monitor", None, "ElectionInterferenceMonitor", "high", "feature"),
    ("Face Verification", None, "FaceVerificationEngine", "medium", "feature"),
    ("Multimodal Processor", None, "MultimodalEmotionProcessor", "medium", "feature"),
    # Data import / sync
    ("Senate Directory Sync", None, "SenateDirectorySync", "medium", "integration"),
    ("MP Directory Sync", None, "MPDirectorySync", "medium", "integration"),
    ("Ministers Directory Sync", None, "MinisterDirectorySync", "medium", "integration"),
    ("Party Directory Sync", None, "PartyDirectorySync", "medium", "integration"),
    ("Government Website Scraper", None, "GovWebsiteScraper", "medium", "integration"),
    ("Bulk Import System", None, "BulkImportButton", "medium", "integration"),
    # Security & admin
    ("Role Control System", None, "RoleControlSystem", "critical", "feature"),
    ("Civic Alert System", None, "CivicAlertSystem", "high", "feature"),
    ("Cache Management", None, "CacheManagementDashboard", "medium", "feature"),
    ("Cache Status Monitor", None, "CacheStatusMonitor", "low", "feature"),
    # Pan-Africa
    ("Pan-Africa Admin", None, "PanAfricaAdminPanel", "high", "feature"),
    ("Country Router", None, "DynamicCountryRouter", "high", "component"),
    ("Cross-Country Analytics", None, "CrossCountryAnalytics", "medium", "feature"),
]
