"""
The configuration wizard as an explicit finite-state sequence.

    PACKAGES -> DIRECTORIES -> ASSEMBLIES -> EXPORT -> DONE

Each step has a handler supplied by the embedding application (for example,
applying the package selection to the manifest) and a transition function that
names the next step. The wizard knows nothing about how steps are rendered.
"""

import logging
from enum import Enum
from typing import Callable, Dict, List, Optional

from upmpack.upmpack_exceptions import UpmpackException
from upmpack.upmpack_logger import UpmpackLogger


class WizardStep(str, Enum):
    PACKAGES = "packages"
    DIRECTORIES = "directories"
    ASSEMBLIES = "assemblies"
    EXPORT = "export"
    DONE = "done"


StepHandler = Callable[[], None]


def _after_packages() -> WizardStep:
    return WizardStep.DIRECTORIES


def _after_directories() -> WizardStep:
    return WizardStep.ASSEMBLIES


def _after_assemblies() -> WizardStep:
    return WizardStep.EXPORT


def _after_export() -> WizardStep:
    return WizardStep.DONE


TRANSITIONS: Dict[WizardStep, Callable[[], WizardStep]] = {
    WizardStep.PACKAGES: _after_packages,
    WizardStep.DIRECTORIES: _after_directories,
    WizardStep.ASSEMBLIES: _after_assemblies,
    WizardStep.EXPORT: _after_export,
}

STEP_INFO: Dict[WizardStep, str] = {
    WizardStep.PACKAGES: "Step 1: review the package selection. 'Next' saves it to the manifest.",
    WizardStep.DIRECTORIES: "Step 2: review the environment directories. 'Next' saves them.",
    WizardStep.ASSEMBLIES: "Step 3: review the assembly configuration. 'Next' saves it.",
    WizardStep.EXPORT: "Step 4: export the configuration. 'Finish' completes the setup.",
    WizardStep.DONE: "Configuration complete. You can now run the game.",
}


class ConfigurationWizard:
    """
    Drives the wizard through its steps.

    A step without a handler simply advances. If a handler raises, the wizard
    stays on that step and the exception propagates.
    """

    def __init__(
        self,
        handlers: Optional[Dict[WizardStep, StepHandler]] = None,
        logger: Optional[UpmpackLogger] = None,
    ):
        self.handlers = dict(handlers or {})
        self.logger = logger or UpmpackLogger()
        self.current = WizardStep.PACKAGES
        self.completed: List[WizardStep] = []

    @property
    def is_done(self) -> bool:
        return self.current == WizardStep.DONE

    def step_info(self) -> str:
        return STEP_INFO[self.current]

    def advance(self) -> WizardStep:
        """
        Run the current step's handler and move to the next step.

        Returns:
            The new current step

        Raises:
            UpmpackException: If the wizard is already done
        """
        if self.is_done:
            raise UpmpackException("Configuration wizard is already complete")

        step = self.current
        handler = self.handlers.get(step)
        if handler is not None:
            handler()
        self.logger.log(f"Wizard step '{step.value}' completed", logging.INFO)

        self.completed.append(step)
        self.current = TRANSITIONS[step]()
        return self.current

    def run_to_completion(self) -> List[WizardStep]:
        """Advance until DONE; returns the steps that were executed."""
        while not self.is_done:
            self.advance()
        return list(self.completed)
