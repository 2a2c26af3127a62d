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

from lxdprov.utils.http import create_session


class TestCreateSession(unittest.TestCase):
    def test_single_attempt_by_default(self):
        session = create_session()
        retries = session.get_adapter("https://lxd.local:8443").max_retries
        self.assertEqual(retries.total, 0)
        self.assertFalse(retries.read)
        self.assertTrue(session.verify)
        session.close()

    def test_tls_options(self):
        session = create_session(verify=False, cert=("/c.pem", "/k.pem"))
        self.assertFalse(session.verify)
        self.assertEqual(session.cert, ("/c.pem", "/k.pem"))
        session.close()


if __name__ == '__main__':
    unittest.main()
