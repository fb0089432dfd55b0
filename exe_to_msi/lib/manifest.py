from __future__ import annotations

import logging
import re
import uuid
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path

from ..request import InstallerRequest
from .identifiers import derive_identifier, new_component_guid

logger = logging.getLogger(__name__)

WIX_NS = "http://schemas.microsoft.com/wix/2006/wi"
ET.register_namespace("", WIX_NS)

DEFAULT_MANUFACTURER = "ExeToMsi"
DEFAULT_LANGUAGE = "1033"


@dataclass(frozen=True)
class Manifest:
    path: Path
    text: str
    upgrade_code: uuid.UUID
    component_guid: uuid.UUID


def wix_identifier(name: str) -> str:
    """WiX Ids allow only letters, digits, '_' and '.', and must not start with a digit."""

    ident = re.sub(r"[^A-Za-z0-9_.]", "_", name)
    if not ident or not (ident[0].isalpha() or ident[0] == "_"):
        ident = "_" + ident
    return ident


def _el(parent: ET.Element, tag: str, **attrs: str) -> ET.Element:
    return ET.SubElement(parent, f"{{{WIX_NS}}}{tag}", attrs)


def _build_tree(
    req: InstallerRequest,
    *,
    upgrade_code: uuid.UUID,
    component_guid: uuid.UUID,
    manufacturer: str,
    language: str,
) -> ET.Element:
    name = req.package_name

    wix = ET.Element(f"{{{WIX_NS}}}Wix")
    product = _el(
        wix,
        "Product",
        Id="*",
        Name=f"{name} ExeToMsi",
        Language=language,
        Version=req.package_version,
        Manufacturer=manufacturer,
        UpgradeCode=str(upgrade_code),
    )
    _el(product, "Package", InstallerVersion="500", Compressed="yes", InstallScope="perMachine")
    _el(
        product,
        "MajorUpgrade",
        AllowSameVersionUpgrades="yes",
        DowngradeErrorMessage="A newer version of [ProductName] is already installed.",
    )
    _el(product, "Media", Id="1", Cabinet="product.cab", EmbedCab="yes")

    target = _el(product, "Directory", Id="TARGETDIR", Name="SourceDir")
    program_files = _el(target, "Directory", Id="ProgramFilesFolder")
    _el(program_files, "Directory", Id="INSTALLFOLDER", Name=name)

    component = _el(product, "Component", Id="MainExecutable", Guid=str(component_guid), Directory="INSTALLFOLDER")
    _el(component, "File", Id=wix_identifier(name), Source=req.exe_path, KeyPath="yes")

    feature = _el(product, "Feature", Id="ProductFeature", Title=name, Level="1")
    _el(feature, "ComponentRef", Id="MainExecutable")

    command = f'"[INSTALLFOLDER]{req.exe_name}"'
    if req.exe_arguments:
        command = f"{command} {req.exe_arguments}"

    # Launched by the installer after files land; the install does not wait on it.
    _el(
        product,
        "CustomAction",
        Id="RunEXE",
        Directory="INSTALLFOLDER",
        ExeCommand=command,
        Execute="deferred",
        Return="asyncNoWait",
        Impersonate="no",
    )
    sequence = _el(product, "InstallExecuteSequence")
    custom = _el(sequence, "Custom", Action="RunEXE", Before="InstallFinalize")
    custom.text = "NOT Installed"

    return wix


def render_manifest(
    req: InstallerRequest,
    *,
    path: Path,
    manufacturer: str = DEFAULT_MANUFACTURER,
    language: str = DEFAULT_LANGUAGE,
) -> Manifest:
    upgrade_code = derive_identifier(req.msi_file_name)
    component_guid = new_component_guid()

    root = _build_tree(
        req,
        upgrade_code=upgrade_code,
        component_guid=component_guid,
        manufacturer=manufacturer,
        language=language,
    )
    ET.indent(root, space="  ")
    body = ET.tostring(root, encoding="unicode")
    text = '<?xml version="1.0" encoding="UTF-8"?>\n' + body + "\n"

    return Manifest(path=path, text=text, upgrade_code=upgrade_code, component_guid=component_guid)


def generate_manifest(
    req: InstallerRequest,
    *,
    work_dir: Path,
    manifest_name: str,
    manufacturer: str = DEFAULT_MANUFACTURER,
    language: str = DEFAULT_LANGUAGE,
) -> Manifest:
    """Render the WiX source for req and write it to work_dir/manifest_name."""

    manifest = render_manifest(
        req,
        path=Path(work_dir) / manifest_name,
        manufacturer=manufacturer,
        language=language,
    )
    logger.info("Generating WXS file %s", manifest.path)
    logger.debug("UpgradeCode=%s ComponentGuid=%s", manifest.upgrade_code, manifest.component_guid)
    manifest.path.write_text(manifest.text, encoding="utf-8")
    return manifest
