"""Structured errors carrying a code, a severity and remediation hints."""

from __future__ import annotations

from collections.abc import Iterable
from enum import IntEnum

ERR_GET_CRD_NAMES_CODE = "meshkit-11233"
ERR_GET_SCHEMAS_CODE = "meshkit-11234"
ERR_GET_API_VERSION_CODE = "meshkit-11235"
ERR_GET_API_GROUP_CODE = "meshkit-11236"
ERR_POPULATING_YAML_CODE = "meshkit-11237"
ERR_ABSENT_FILTER_CODE = "meshkit-11238"
ERR_CREATING_DIRECTORY_CODE = "meshkit-11239"
ERR_GET_RESOURCE_IDENTIFIER_CODE = "meshkit-11240"
ERR_INVALID_SIZE_FILE_CODE = "meshkit-11241"
ERR_CLONING_REPO_CODE = "meshkit-11242"

ERR_UNMARSHAL_CODE = "meshkit-utils-unmarshal"
ERR_MARSHAL_CODE = "meshkit-utils-marshal"
ERR_GET_BOOL_CODE = "meshkit-utils-get-bool"
ERR_TYPE_CAST_CODE = "meshkit-utils-type-cast"
ERR_READ_FILE_CODE = "meshkit-utils-read-file"
ERR_WRITE_FILE_CODE = "meshkit-utils-write-file"
ERR_CREATE_FILE_CODE = "meshkit-utils-create-file"
ERR_CREATE_DIR_CODE = "meshkit-utils-create-dir"
ERR_READ_DIR_CODE = "meshkit-utils-read-dir"
ERR_EXTRACT_ZIP_CODE = "meshkit-utils-extract-zip"
ERR_EXTRACT_TAR_CODE = "meshkit-utils-extract-tar"
ERR_INVALID_PROTOCOL_CODE = "meshkit-utils-invalid-protocol"
ERR_REMOTE_FILE_NOT_FOUND_CODE = "meshkit-utils-remote-file-not-found"
ERR_READING_REMOTE_FILE_CODE = "meshkit-utils-reading-remote-file"
ERR_READING_LOCAL_FILE_CODE = "meshkit-utils-reading-local-file"
ERR_GETTING_LATEST_RELEASE_TAG_CODE = "meshkit-utils-latest-release-tag"
ERR_INVALID_SCHEMA_VERSION_CODE = "meshkit-utils-invalid-schema-version"


class Severity(IntEnum):
    """How serious an error is."""

    EMERGENCY = 0
    ALERT = 1
    CRITICAL = 2
    FATAL = 3


class MeshkitError(Exception):
    """An error with a code, a severity and human readable explanations."""

    def __init__(
        self,
        code: str,
        severity: Severity,
        short_description: Iterable[str],
        long_description: Iterable[str] = (),
        probable_cause: Iterable[str] = (),
        suggested_remediation: Iterable[str] = (),
    ) -> None:
        self.code = code
        self.severity = severity
        self.short_description = list(short_description)
        self.long_description = list(long_description)
        self.probable_cause = list(probable_cause)
        self.suggested_remediation = list(suggested_remediation)
        super().__init__(": ".join(self.short_description))

    def __str__(self) -> str:
        return ": ".join(self.short_description)


def _alert(code, short, long, cause, remedy) -> MeshkitError:
    return MeshkitError(code, Severity.ALERT, short, long, cause, remedy)


def err_get_resource_identifier(err) -> MeshkitError:
    return _alert(
        ERR_GET_RESOURCE_IDENTIFIER_CODE,
        ["Error extracting the resource identifier name"],
        [str(err)],
        ["Could not extract the value with the given filter configuration"],
        [
            "Make sure to input a valid manifest",
            "Make sure to provide the right filter configurations",
            "Make sure the filters are appropriate for the given manifest",
        ],
    )


def err_get_crd_names(err) -> MeshkitError:
    return _alert(
        ERR_GET_CRD_NAMES_CODE,
        ["Error getting crd names"],
        [str(err)],
        ["Could not execute kubeopenapi-jsonschema correctly"],
        ["Make sure the binary is valid and correct", "Make sure the filter passed is correct"],
    )


def err_get_schemas(err) -> MeshkitError:
    return _alert(
        ERR_GET_SCHEMAS_CODE,
        ["Error getting schemas"],
        [str(err)],
        ["Schemas Json could not be produced from given crd."],
        ["Make sure the filter passed is correct"],
    )


def err_get_api_version(err) -> MeshkitError:
    return _alert(
        ERR_GET_API_VERSION_CODE,
        ["Error getting api version"],
        [str(err)],
        ["Api version could not be parsed"],
        ["Make sure the filter passed is correct"],
    )


def err_get_api_group(err) -> MeshkitError:
    return _alert(
        ERR_GET_API_GROUP_CODE,
        ["Error getting api group"],
        [str(err)],
        ["Api group could not be parsed"],
        ["Make sure the filter passed is correct"],
    )


def err_populating_yaml(err) -> MeshkitError:
    return _alert(
        ERR_POPULATING_YAML_CODE,
        ["Error populating yaml"],
        [str(err)],
        ["Yaml could not be populated with the returned manifests"],
        [""],
    )


def err_absent_filter(err) -> MeshkitError:
    return _alert(
        ERR_ABSENT_FILTER_CODE,
        ["Error with passed filters"],
        [str(err)],
        ["ItrFilter or ItrSpecFilter is either not passed or empty"],
        ["Pass the correct ItrFilter and ItrSpecFilter"],
    )


def err_creating_directory(err) -> MeshkitError:
    return _alert(
        ERR_CREATING_DIRECTORY_CODE,
        ["could not create directory"],
        [str(err)],
        ["proper file permissions were not set"],
        ["check the appropriate file permissions"],
    )


def err_cloning_repo(err) -> MeshkitError:
    return _alert(ERR_CLONING_REPO_CODE, ["could not clone the repo"], [str(err)], [], [])


def err_invalid_size_file(err) -> MeshkitError:
    return _alert(
        ERR_INVALID_SIZE_FILE_CODE,
        [str(err)],
        ["Could not read the file while walking the repo"],
        ["Given file size is either 0 or exceeds the limit of 50 MB"],
        [""],
    )


def err_unmarshal(err) -> MeshkitError:
    return _alert(
        ERR_UNMARSHAL_CODE,
        ["Unmarshal unknown error"],
        [str(err)],
        ["Invalid object format"],
        ["Make sure to input a valid JSON object"],
    )


def err_marshal(err) -> MeshkitError:
    return _alert(
        ERR_MARSHAL_CODE,
        ["Error marshalling the object"],
        [str(err)],
        ["The object contains values that cannot be serialized"],
        ["Make sure the object holds only serializable values"],
    )


def err_get_bool(key, err) -> MeshkitError:
    return _alert(
        ERR_GET_BOOL_CODE,
        [f"Error while getting boolean value for key: {key}"],
        [str(err)],
        ["The value is not a valid boolean"],
        ["Make sure the value is one of the accepted boolean literals"],
    )


def err_type_cast(err) -> MeshkitError:
    return _alert(
        ERR_TYPE_CAST_CODE,
        ["Invalid type assertion requested"],
        [str(err)],
        ["The value does not have the requested type"],
        ["Make sure the value is of the expected type"],
    )


def err_read_file(err, path) -> MeshkitError:
    return _alert(
        ERR_READ_FILE_CODE,
        [f"Error reading file at {path}"],
        [str(err)],
        ["The file does not exist or cannot be read"],
        ["Make sure the path is correct and readable"],
    )


def err_write_file(err, path) -> MeshkitError:
    return _alert(
        ERR_WRITE_FILE_CODE,
        [f"Error writing file at {path}"],
        [str(err)],
        ["Insufficient permissions or disk space"],
        ["Make sure the location is writable"],
    )


def err_create_file(err, path) -> MeshkitError:
    return _alert(
        ERR_CREATE_FILE_CODE,
        [f"Error creating file at {path}"],
        [str(err)],
        ["Insufficient permissions or the parent directory is missing"],
        ["Make sure the location exists and is writable"],
    )


def err_create_dir(err, path) -> MeshkitError:
    return _alert(
        ERR_CREATE_DIR_CODE,
        [f"Error creating directory at {path}"],
        [str(err)],
        ["Insufficient permissions"],
        ["Make sure the location is writable"],
    )


def err_read_dir(err, path) -> MeshkitError:
    return _alert(
        ERR_READ_DIR_CODE,
        [f"Error reading directory at {path}"],
        [str(err)],
        ["The directory does not exist or cannot be read"],
        ["Make sure the path is correct and readable"],
    )


def err_extract_zip(err, path) -> MeshkitError:
    return _alert(
        ERR_EXTRACT_ZIP_CODE,
        [f"Error extracting zip archive into {path}"],
        [str(err)],
        ["The archive is corrupt or the destination is not writable"],
        ["Make sure the archive is valid and the destination is writable"],
    )


def err_extract_tar(err, path) -> MeshkitError:
    return _alert(
        ERR_EXTRACT_TAR_CODE,
        [f"Error extracting tar archive into {path}"],
        [str(err)],
        ["The archive is corrupt or holds unsupported entries"],
        ["Make sure the archive is valid and the destination is writable"],
    )


def err_invalid_protocol() -> MeshkitError:
    return _alert(
        ERR_INVALID_PROTOCOL_CODE,
        ["invalid protocol: only http, https and file are valid protocols"],
        [],
        ["The location uses an unsupported scheme"],
        ["Use a location starting with http, https or file"],
    )


def err_remote_file_not_found(url) -> MeshkitError:
    return _alert(
        ERR_REMOTE_FILE_NOT_FOUND_CODE,
        [f"remote file not found at {url}"],
        [],
        ["The remote location returned not found"],
        ["Make sure the URL is correct"],
    )


def err_reading_remote_file(err) -> MeshkitError:
    return _alert(
        ERR_READING_REMOTE_FILE_CODE,
        ["error reading remote file"],
        [str(err)],
        ["The response body could not be read"],
        ["Check the network connection and retry"],
    )


def err_reading_local_file(err) -> MeshkitError:
    return _alert(
        ERR_READING_LOCAL_FILE_CODE,
        ["error reading local file"],
        [str(err)],
        ["The file does not exist or cannot be read"],
        ["Make sure the path is correct and readable"],
    )


def err_getting_latest_release_tag(err) -> MeshkitError:
    return _alert(
        ERR_GETTING_LATEST_RELEASE_TAG_CODE,
        ["Could not fetch latest stable release version"],
        [str(err)],
        ["The releases page could not be fetched or holds no releases"],
        ["Check the organisation and repository names"],
    )


def err_invalid_schema_version() -> MeshkitError:
    return _alert(
        ERR_INVALID_SCHEMA_VERSION_CODE,
        ["Invalid schema version"],
        ["The schemaVersion key is either empty or has an incorrect value."],
        ["The schema is not of type 'relationship', 'component', 'model' or 'policy'"],
        ["Verify that schemaVersion key is set correctly"],
    )