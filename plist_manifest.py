from dataclasses import dataclass

_XML_ENTITIES = str.maketrans({
    '&': '&amp;',
    '<': '&lt;',
    '>': '&gt;',
    '"': '&quot;',
    "'": '&apos;',
})

PLIST_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE plist PUBLIC "-//Apple//DTD PLIST 1.0//EN" "http://www.apple.com/DTDs/PropertyList-1.0.dtd">
<plist version="1.0">
<dict>
  <key>items</key>
  <array><dict>
    <key>assets</key>
    <array><dict>
      <key>kind</key><string>software-package</string>
      <key>url</key><string>{ipa_url}</string>
    </dict></array>
    <key>metadata</key>
    <dict>
      <key>bundle-identifier</key><string>{bundle_id}</string>
      <key>bundle-version</key><string>{version}</string>
      <key>kind</key><string>software</string>
      <key>title</key><string>{app_name}</string>
    </dict>
  </dict></array>
</dict>
</plist>"""

DOCUMENT_FIELDS = ('ipaUrl', 'bundleId', 'version', 'appName')


def escape_xml(value):
    return value.translate(_XML_ENTITIES)


def build_plist(ipa_url, bundle_id, version, app_name):
    return PLIST_TEMPLATE.format(
        ipa_url=escape_xml(ipa_url),
        bundle_id=escape_xml(bundle_id),
        version=escape_xml(version),
        app_name=escape_xml(app_name),
    )


@dataclass(frozen=True)
class ManifestRecord:
    ipa_url: str
    bundle_id: str
    version: str
    app_name: str

    @classmethod
    def from_document(cls, data):
        """Build a record from a store document keyed like the query string.

        Raises KeyError naming the first missing or null field.
        """
        missing = [k for k in DOCUMENT_FIELDS if data.get(k) is None]
        if missing:
            raise KeyError(missing[0])
        return cls(
            ipa_url=str(data['ipaUrl']),
            bundle_id=str(data['bundleId']),
            version=str(data['version']),
            app_name=str(data['appName']),
        )

    def to_plist(self):
        return build_plist(self.ipa_url, self.bundle_id, self.version, self.app_name)
