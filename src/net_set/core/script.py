"""Generate the non-interactive network configuration script for a provider."""

from __future__ import annotations

import shlex

from net_set.core.base import DnsProvider

SCRIPT_NAME = "net_set_auto.sh"

USE_TEMPADDR_PATH = "/proc/sys/net/ipv6/conf/all/use_tempaddr"
CONNECTIVITY_TARGET = "1.1.1.1"
CONNECTIVITY_TIMEOUT = 3

_TEMPLATE = """\
#!/bin/sh
# Generated by net-set. Applies the {name} DNS profile without prompting;
# safe to run repeatedly.

set -eu

echo "=== Automatic Network Configuration ==="
echo

if [ "$(id -u)" -ne 0 ]; then
    echo "Not running as root; privileged steps may be skipped."
fi

echo "[1/4] IPv6 Configuration..."
if [ -w {tempaddr} ]; then
    {{ echo 2 > {tempaddr}; }} 2>/dev/null || echo "IPv6 preference not applied (non-critical)"
elif [ -e {tempaddr} ]; then
    echo "IPv6 preference not writable (non-critical)"
else
    echo "IPv6 configuration not available on this device"
fi

echo "[2/4] DNS Provider Configuration..."
printf '%s\\n' {provider_line}
printf '%s\\n' {primary_line}
printf '%s\\n' {secondary_line}

echo "[3/4] Network Interface Check..."
for iface in /sys/class/net/*; do
    [ -d "$iface" ] || continue
    echo "Interface: $(basename "$iface")"
    if [ -f "$iface/address" ]; then
        echo "  MAC: $(cat "$iface/address" 2>/dev/null || echo "N/A")"
    fi
done

echo "[4/4] Connectivity Test..."
if ping -c 1 -W {ping_timeout} {target} >/dev/null 2>&1; then
    echo "Internet connectivity: OK"
else
    echo "Internet connectivity: Limited"
fi

echo
echo "Note: a full DNS change on this device needs:"
echo "- Root access (su)"
echo "- System permissions"
echo "- SELinux policy modifications"
echo
echo "=== Configuration Attempted ==="
echo "Basic network settings have been applied where possible."
"""


def generate_script(provider: DnsProvider) -> str:
    """Render the configuration script for a provider.

    Only the provider name and its primary/secondary IPv4 addresses vary;
    everything else is fixed. The caller persists the text and marks it
    executable.
    """
    return _TEMPLATE.format(
        name=provider.name,
        tempaddr=USE_TEMPADDR_PATH,
        provider_line=shlex.quote(f"Selected DNS Provider: {provider.name}"),
        primary_line=shlex.quote(f"Primary DNS: {provider.primary_ipv4}"),
        secondary_line=shlex.quote(f"Secondary DNS: {provider.secondary_ipv4}"),
        ping_timeout=CONNECTIVITY_TIMEOUT,
        target=CONNECTIVITY_TARGET,
    )
