"""Names used when proposing files: paths, branches, titles, messages, templates."""

LICENSE_FILE = "LICENSE"
COMPLIANCE_FILE = "COMPLIANCE.yaml"

LICENSE_BRANCH = "mountie/add-license"
COMPLIANCE_BRANCH = "mountie/add-compliance"

LICENSE_PR_TITLE = "Add missing license"
COMPLIANCE_PR_TITLE = "Add missing compliance file"

LICENSE_COMMIT_MESSAGE = "Add Apache 2.0 license"
COMPLIANCE_COMMIT_MESSAGE = "Add compliance file"

# Template names under the templates directory
LICENSE_TEMPLATE = "LICENSE"
COMPLIANCE_TEMPLATE = "COMPLIANCE.yaml"
WHY_LICENSE_TEXT = "why-license.md"
WHY_COMPLY_TEXT = "why-comply.md"
