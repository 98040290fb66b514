# SPDX-License-Identifier: LGPL-3.0-or-later
import unittest

from nmconfigurator.network.model import Host, Interface, LiveInterface, normalize_mac


class TestModel(unittest.TestCase):
    def test_normalize_mac(self):
        self.assertEqual(normalize_mac(" AA:BB:CC:DD:EE:FF "), "aa:bb:cc:dd:ee:ff")
        self.assertIsNone(normalize_mac(""))
        self.assertIsNone(normalize_mac(None))

    def test_interface_lowercases_mac(self):
        iface = Interface("eth0", "AA:BB:CC:DD:EE:FF", "ethernet")
        self.assertEqual(iface.mac_address, "aa:bb:cc:dd:ee:ff")
        self.assertTrue(iface.is_ethernet)

    def test_live_interface_lowercases_mac(self):
        self.assertEqual(LiveInterface("ens3", "0A:0B:0C:0D:0E:0F").mac_address, "0a:0b:0c:0d:0e:0f")

    def test_interface_to_dict(self):
        self.assertEqual(
            Interface("eth1").to_dict(),
            {"logical_name": "eth1", "mac_address": None},
        )
        self.assertEqual(
            Interface("eth0", "aa:bb:cc:dd:ee:ff", "ethernet").to_dict(),
            {"logical_name": "eth0", "mac_address": "aa:bb:cc:dd:ee:ff", "interface_type": "ethernet"},
        )

    def test_host_helpers(self):
        host = Host("node1", [Interface("eth0", "aa:bb:cc:dd:ee:ff"), Interface("bond0")])
        self.assertEqual(host.mac_addresses(), ["aa:bb:cc:dd:ee:ff"])
        self.assertIs(host.interface_by_name("bond0"), host.interfaces[1])
        self.assertIsNone(host.interface_by_name("eth9"))


if __name__ == "__main__":
    unittest.main()
