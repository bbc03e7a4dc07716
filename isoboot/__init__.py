"""Boot ISO images under QEMU and build cloud-init seed images."""

__version__ = '0.1.0'
