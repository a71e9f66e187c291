from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import FrozenSet, Optional, Protocol

from .errors import ConfirmationRequired
from .names import reverse, sanitize


CONFIRM_TOKEN = "I_ACCEPT_RISK"


# Conservative blocklist: never wrapped unless forced
SENSITIVE_BLOCKLIST: FrozenSet[str] = frozenset(
    [
        # accounts and privilege
        "su", "sudo", "sudoedit", "visudo", "passwd", "chpasswd",
        "useradd", "userdel", "groupadd", "groupdel", "login",
        # ownership and permissions
        "chown", "chgrp", "chmod", "chroot", "chattr", "chcon", "setfacl", "getfacl",
        # power and init
        "reboot", "shutdown", "halt", "init", "telinit", "systemctl", "systemd-run",
        "service", "sysctl",
        # disks and filesystems
        "mount", "umount", "losetup", "dd", "ddrescue", "dd_rescue", "shred", "wipe",
        "wipefs", "mkfs", "fdisk", "sfdisk", "parted", "badblocks", "cryptsetup",
        "vgcreate", "vgextend", "lvcreate",
        # packages
        "apt", "apt-get", "aptitude", "dpkg", "pacman", "zypper", "rpm",
        "snap", "snapd", "snapctl",
        # network administration
        "iptables", "nft", "ip", "ifconfig", "nmcli", "tc", "qdisc", "tcptraceroute",
        "sshd", "nc", "ncat", "socat",
        # containers
        "docker", "podman", "docker-compose", "kubectl", "kubectl-", "kubectl.krew",
        # interactive multiplexers
        "tmux", "screen",
    ]
)


class SkipReason(str, enum.Enum):
    SINGLE_CHAR = "single_char"
    SENSITIVE = "sensitive"
    PALINDROME = "palindrome"
    COLLISION = "collision"

    def __str__(self) -> str:
        return self.value


class Resolver(Protocol):
    def resolves(self, name: str) -> bool:
        ...


@dataclass(frozen=True)
class SafetyPolicy:
    """Which names may be wrapped; build with :meth:`from_flags`."""

    blocklist: FrozenSet[str] = SENSITIVE_BLOCKLIST
    force: bool = False

    @classmethod
    def from_flags(
        cls,
        force: bool = False,
        confirm: Optional[str] = None,
        blocklist: FrozenSet[str] = SENSITIVE_BLOCKLIST,
    ) -> "SafetyPolicy":
        if force and confirm != CONFIRM_TOKEN:
            raise ConfirmationRequired(
                f'--force-sensitive requires --confirm="{CONFIRM_TOKEN}". Aborting.'
            )
        return cls(blocklist=frozenset(blocklist), force=force)


def classify(name: str, policy: SafetyPolicy, resolver: Resolver) -> Optional[SkipReason]:
    """Return why ``name`` must not be wrapped, or None if it may be.

    Rules are checked in order and the first match wins. Forcing only lifts
    the blocklist rule; palindrome and collision checks still apply.
    """
    if len(name) <= 1:
        return SkipReason.SINGLE_CHAR

    if name in policy.blocklist and not policy.force:
        return SkipReason.SENSITIVE

    rev = reverse(name)
    if rev == name:
        return SkipReason.PALINDROME

    if resolver.resolves(rev) or resolver.resolves(sanitize(rev)):
        return SkipReason.COLLISION

    return None


__all__ = [
    "CONFIRM_TOKEN",
    "SENSITIVE_BLOCKLIST",
    "SkipReason",
    "Resolver",
    "SafetyPolicy",
    "classify",
]
