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

import unittest

from lxdprov.config import Settings
from lxdprov.exceptions import InvalidInputError
from lxdprov.models import InstanceSpec, LifecycleAction, ServerEndpoint


class TestLifecycleAction(unittest.TestCase):
    def test_parse_host_verbs(self):
        self.assertIs(LifecycleAction.parse("create"), LifecycleAction.CREATE)
        self.assertIs(LifecycleAction.parse("change"), LifecycleAction.CHANGE_PLAN)
        self.assertIs(LifecycleAction.parse("password"), LifecycleAction.CHANGE_PASSWORD)
        self.assertIs(LifecycleAction.parse("conn_test"), LifecycleAction.TEST_CONNECTION)
        self.assertIs(LifecycleAction.parse(" Get_Usage "), LifecycleAction.GET_USAGE)

    def test_parse_enum_names(self):
        self.assertIs(LifecycleAction.parse("change_plan"), LifecycleAction.CHANGE_PLAN)
        self.assertIs(LifecycleAction.parse(LifecycleAction.RENEW), LifecycleAction.RENEW)

    def test_parse_rejects_unknown(self):
        for name in ("reboot", "", None, "listActive"):
            with self.subTest(name=name):
                with self.assertRaises(InvalidInputError):
                    LifecycleAction.parse(name)


class TestInstanceSpec(unittest.TestCase):
    def test_short_names(self):
        spec = InstanceSpec.from_params({"hostname": "cloud1", "cores": "2", "memory": "4", "storage": "40"})
        self.assertEqual(spec.hostname, "cloud1")
        self.assertEqual(spec.cpu_cores, 2)
        self.assertEqual(spec.memory_gb, 4)
        self.assertEqual(spec.storage_gb, 40)

    def test_numbered_config_options(self):
        spec = InstanceSpec.from_params({
            "configoption1": "web",
            "configoption2": "4",
            "configoption3": "8",
            "configoption4": "80",
            "serviceid": 17,
        })
        self.assertEqual((spec.hostname, spec.cpu_cores, spec.memory_gb, spec.storage_gb), ("web", 4, 8, 80))
        self.assertEqual(spec.service_id, "17")

    def test_named_config_options_win(self):
        spec = InstanceSpec.from_params({
            "configoptions": {"Hostname": "named", "CPU Cores": "8"},
            "configoption1": "numbered",
            "configoption2": "1",
        })
        self.assertEqual(spec.hostname, "named")
        self.assertEqual(spec.cpu_cores, 8)

    def test_non_integer_size(self):
        with self.assertRaises(InvalidInputError):
            InstanceSpec.from_params({"hostname": "cloud1", "cores": "two"})

    def test_blank_values_are_absent(self):
        spec = InstanceSpec.from_params({"hostname": "", "memory": None})
        self.assertIsNone(spec.hostname)
        self.assertIsNone(spec.memory_gb)

    def test_extra_fields_exclude_server_credentials(self):
        spec = InstanceSpec.from_params({
            "hostname": "cloud1",
            "image": "debian/12",
            "serverpassword": "hunter2",
            "serveraccesshash": "tok",
            "customfields": {"a": "b"},
        })
        self.assertEqual(spec.extra, {"image": "debian/12"})

    def test_template_fields(self):
        spec = InstanceSpec(hostname="cloud1", cpu_cores=2, extra={"hostname": "shadow", "image": "x"})
        fields = spec.template_fields()
        self.assertEqual(fields["hostname"], "cloud1")
        self.assertEqual(fields["cpu_cores"], 2)
        self.assertEqual(fields["image"], "x")
        self.assertNotIn("memory_gb", fields)


class TestServerEndpoint(unittest.TestCase):
    def test_token_endpoint(self):
        endpoint = ServerEndpoint.from_params({
            "serverhostname": "lxd.example.com",
            "serverport": "8443",
            "serversecure": "on",
            "serveraccesshash": "tok",
        })
        self.assertEqual(endpoint.base_url, "https://lxd.example.com:8443")
        self.assertEqual(endpoint.auth_scheme, "bearer")
        self.assertNotIn("tok", repr(endpoint))

    def test_default_ports(self):
        secure = ServerEndpoint.from_params({"serverip": "10.0.0.5", "serversecure": "true"})
        plain = ServerEndpoint.from_params({"serverip": "10.0.0.5", "serversecure": ""})
        self.assertEqual(secure.base_url, "https://10.0.0.5:1112")
        self.assertEqual(plain.base_url, "http://10.0.0.5:1111")

    def test_ipv6_host(self):
        endpoint = ServerEndpoint.from_params({"serverip": "fd00::1", "serverport": "8443"})
        self.assertEqual(endpoint.base_url, "https://[fd00::1]:8443")

    def test_basic_credentials(self):
        endpoint = ServerEndpoint.from_params({
            "serverhostname": "lxd",
            "serverusername": "admin",
            "serverpassword": "pw",
        })
        self.assertEqual(endpoint.auth_scheme, "basic")
        self.assertEqual((endpoint.username, endpoint.password), ("admin", "pw"))

    def test_settings_fallbacks(self):
        settings = Settings(token="env-token", client_cert="/c.pem", client_key="/k.pem", verify_tls=False)
        endpoint = ServerEndpoint.from_params({"serverhostname": "lxd"}, settings)
        self.assertEqual(endpoint.token, "env-token")
        self.assertEqual(endpoint.cert_pair, ("/c.pem", "/k.pem"))
        self.assertFalse(endpoint.verify)

    def test_host_credential_beats_settings_token(self):
        settings = Settings(token="env-token")
        endpoint = ServerEndpoint.from_params({"serverhostname": "lxd", "serverusername": "admin"}, settings)
        self.assertIsNone(endpoint.token)
        self.assertEqual(endpoint.auth_scheme, "basic")

    def test_invalid_server_params(self):
        for params in (
            {},
            {"serverhostname": "lxd", "serverport": "http"},
            {"serverhostname": "lxd", "serverport": "70000"},
            {"serverhostname": "lxd", "serversecure": "maybe"},
        ):
            with self.subTest(params=params):
                with self.assertRaises(InvalidInputError):
                    ServerEndpoint.from_params(params)


if __name__ == '__main__':
    unittest.main()
