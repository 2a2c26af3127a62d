# Copyright The Volcano Authors.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Host plugin descriptor.

The billing host looks callbacks up by conventional names (CreateAccount,
SuspendAccount, ...). This module exposes those names as a table bound to a
ProvisioningClient, together with the static metadata and plan options the
host renders in its admin panel.
"""
from typing import Any, Callable, Dict, Mapping, Optional

import lxdprov.constants as constants
from lxdprov.provisioning import ProvisioningClient
from lxdprov.utils.log import get_logger

logger = get_logger(__name__)

CALLBACKS: Dict[str, str] = {
    "CreateAccount": "create_account",
    "SuspendAccount": "suspend_account",
    "UnsuspendAccount": "unsuspend_account",
    "TerminateAccount": "terminate_account",
    "ChangePassword": "change_password",
    "ChangePackage": "change_package",
    "Renew": "renew",
    "TestConnection": "test_connection",
}

MANAGE_TEMPLATE = "templates/manage.tpl"
OVERVIEW_TEMPLATE = "templates/overview.tpl"
ERROR_TEMPLATE = "error.tpl"


def metadata() -> Dict[str, Any]:
    return {
        "DisplayName": "LXD Container Provisioning",
        "APIVersion": "1.1",
        "RequiresServer": True,
        "DefaultNonSSLPort": str(constants.DEFAULT_PORT),
        "DefaultSSLPort": str(constants.DEFAULT_SSL_PORT),
        "ServiceSingleSignOnLabel": "Login to Panel as User",
        "AdminSingleSignOnLabel": "Login to Panel as Admin",
    }


def admin_custom_buttons() -> Dict[str, str]:
    """Extra admin panel buttons, label to host function suffix"""
    return {
        "List active containers": "listActive",
        "List suspended containers": "listInactive",
    }


def client_area_custom_buttons() -> Dict[str, str]:
    return {}


def _dropdown(options, unit: str = "") -> Dict[str, str]:
    suffix = f" {unit}" if unit else ""
    return {str(o): f"{o}{suffix}" for o in options}


def config_options() -> Dict[str, Dict[str, Any]]:
    """Product options in the order the host maps them to configoption1..4"""
    return {
        "Hostname": {
            "Type": "text",
            "Size": "30",
            "Default": constants.DEFAULT_HOSTNAME,
            "Description": "Enter in desired hostname",
        },
        "CPU Cores": {
            "Type": "dropdown",
            "Options": _dropdown(constants.CPU_CORE_OPTIONS),
            "Description": "Number of CPU cores that will be assigned to the container",
        },
        "Memory": {
            "Type": "dropdown",
            "Options": _dropdown(constants.MEMORY_GB_OPTIONS, "GB"),
            "Description": "Amount of memory assigned to the container",
        },
        "Storage": {
            "Type": "dropdown",
            "Options": _dropdown(constants.STORAGE_GB_OPTIONS, "GB"),
            "Description": "Amount of storage assigned to the container",
        },
    }


def callback_table(client: ProvisioningClient) -> Dict[str, Callable[[Mapping[str, Any]], Any]]:
    """Bind the conventional callback names to a client's methods"""
    return {name: getattr(client, method) for name, method in CALLBACKS.items()}


def dispatch(client: ProvisioningClient, name: str, params: Mapping[str, Any]) -> Any:
    """Invoke the callback the host asked for by name

    A name this module does not provide is answered with an error string in
    the same shape the lifecycle callbacks use, so the host shows it to the
    admin instead of failing.
    """
    method = CALLBACKS.get(name)
    if method is None:
        logger.warning(f"Unknown module callback requested: {name}")
        return f"Unknown module callback: {name}"
    return getattr(client, method)(params)


def client_area(
    client: ProvisioningClient,
    params: Mapping[str, Any],
    requested_action: Optional[str] = None,
) -> Dict[str, Any]:
    """Pick the client area template and the variables it is rendered with

    The 'manage' view shows resource usage, every other request shows the
    container stats overview.
    """
    if requested_action == "manage":
        result = client.get_usage(params)
        template = MANAGE_TEMPLATE
    else:
        result = client.get_stats(params)
        template = OVERVIEW_TEMPLATE

    if not result.success:
        return {
            "tabOverviewReplacementTemplate": ERROR_TEMPLATE,
            "templateVariables": {"usefulErrorHelper": result.reason},
        }

    variables = dict(result.payload) if isinstance(result.payload, Mapping) else {"data": result.payload}
    return {
        "tabOverviewReplacementTemplate": template,
        "templateVariables": variables,
    }
