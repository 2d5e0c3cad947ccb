"""Provisioning steps, in the order they run."""

from vps_init.steps.base import Step
from vps_init.steps.fail2ban import Fail2banStep
from vps_init.steps.hostname import HostnameStep
from vps_init.steps.ssh import SSHStep
from vps_init.steps.swap import SwapStep

STEP_CLASSES = (HostnameStep, SwapStep, SSHStep, Fail2banStep)

__all__ = ["Step", "HostnameStep", "SwapStep", "SSHStep", "Fail2banStep", "STEP_CLASSES"]
