"""pulsedoctor: self-diagnostic audits for the CamerPulse civic platform."""

__version__ = "0.1.0"
