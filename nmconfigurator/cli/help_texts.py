# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# nmconfigurator/cli/help_texts.py
from __future__ import annotations

# Pure help text used by argparse epilog rendering; keep it copy/paste runnable.

YAML_EXAMPLE = r"""# nm-configurator configuration examples (YAML)
#
# Merge multiple configs (later overrides earlier):
#   nmc --config base.yaml --config site.yaml apply
#
# Required paths may come from YAML: nmc parses in two phases
# (--config/logging first, then everything else with the YAML applied as defaults).
#
# Build host (generate):
# config_dir: ./network-states     # one nmstate YAML per host, or a single _all.yaml
# output_dir: ./out                # <host>/*.nmconnection + host_config.yaml
# nmstatectl: /usr/bin/nmstatectl
#
# Booted machine (apply):
# source_dir: /config/network
# destination_dir: /etc/NetworkManager/system-connections
# dry_run: false
#
# Logging (any command):
# verbose: 2
# log_file: /var/log/nm-configurator.log
# json_logs: false
"""

NETWORK_STATE_EXAMPLE = r"""# network-states/node1.yaml
interfaces:
- name: eth0
  type: ethernet
  state: up
  mac-address: AA:BB:CC:DD:EE:FF
  ipv4:
    enabled: true
    dhcp: true
"""

FEATURE_SUMMARY = r""" • generate: nmstate documents -> per-host .nmconnection profiles + host_config.yaml
 • apply: identify this machine by NIC MAC address, install its profiles
 • renames: profiles follow the live interface name when enumeration differs
 • unified mode: a single _all.yaml is applied to every node as-is
 • identify/show: inspect the mapping without touching the system
 • generate-systemd: oneshot unit running apply before NetworkManager
"""
