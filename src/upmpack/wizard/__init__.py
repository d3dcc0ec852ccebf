"""
Step-by-step configuration wizard.
"""

from .configuration_wizard import ConfigurationWizard, WizardStep

__all__ = ["ConfigurationWizard", "WizardStep"]
