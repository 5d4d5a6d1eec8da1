from pydantic import BaseModel, Field
from typing import Optional, List


class DeployInvError(Exception):
    """Base class for all deployinv failures"""


class ConfigError(DeployInvError):
    pass


class CollectionError(DeployInvError):
    pass


class CodecError(DeployInvError):
    pass


class CommandError(DeployInvError):
    def __init__(self, cmd: List[str], returncode: int, output: str):
        self.cmd = cmd
        self.returncode = returncode
        self.output = output
        super().__init__(f"{' '.join(cmd)} exited {returncode}\n{output}")


class Settings(BaseModel):
    csv_path: str = "deployment-info.csv"
    kubectl: str = "kubectl"
    progress_delay_seconds: float = Field(default=0.1, ge=0)
    metrics_textfile: Optional[str] = None


class DeploymentRecord(BaseModel):
    name: str
    namespace: str
    replicas: int = Field(default=0, ge=0)
    # aggregated over every container in the pod template
    cpu_request_m: int = Field(default=0, ge=0)
    cpu_limit_m: int = Field(default=0, ge=0)
    memory_request_mi: int = Field(default=0, ge=0)
    memory_limit_mi: int = Field(default=0, ge=0)
    # only set for RollingUpdate strategies with explicit values
    max_unavailable: str = ""
    max_surge: str = ""
    # HPA fields, left at zero when no HPA targets the deployment
    min_replicas: int = Field(default=0, ge=0)
    max_replicas: int = Field(default=0, ge=0)
    cpu_target_utilization: int = Field(default=0, ge=0)
    scale_up_stabilization: Optional[int] = Field(default=None, ge=0)
    scale_down_stabilization: Optional[int] = Field(default=None, ge=0)
    update_resource_and_hpa: bool = False
    update_hpa_only: bool = False

    @property
    def cpu_request(self) -> str:
        return f"{self.cpu_request_m}m"

    @property
    def cpu_limit(self) -> str:
        return f"{self.cpu_limit_m}m"

    @property
    def memory_request(self) -> str:
        return f"{self.memory_request_mi}Mi"

    @property
    def memory_limit(self) -> str:
        return f"{self.memory_limit_mi}Mi"


class PatchRow(BaseModel):
    """One data row read back from the export file, keyed by column."""
    line: int
    no: str
    name: str
    namespace: str
    replicas: str
    cpu_request: str
    cpu_limit: str
    memory_request: str
    memory_limit: str
    max_unavailable: str
    max_surge: str
    min_replicas: str
    max_replicas: str
    cpu_target_utilization: str
    scale_up_stabilization: str
    scale_down_stabilization: str
    update_resource_and_hpa: str
    update_hpa_only: str

    @property
    def wants_resource_and_hpa(self) -> bool:
        return self.update_resource_and_hpa.strip().lower() == "true"

    @property
    def wants_hpa_only(self) -> bool:
        return self.update_hpa_only.strip().lower() == "true"
