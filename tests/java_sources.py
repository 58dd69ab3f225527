"""Java sources shaped like the ones the host generator renders."""

PACKAGE = "com.mycompany.myapp"
MAIN = "src/main/java/com/mycompany/myapp"
TEST = "src/test/java/com/mycompany/myapp"


def entity_source(class_name: str, package: str = f"{PACKAGE}.domain") -> str:
    return f"""package {package};

import jakarta.persistence.*;
import java.io.Serializable;

/**
 * A {class_name}.
 */
@Entity
@Table(name = "{class_name.lower()}")
public class {class_name} implements Serializable {{

    private static final long serialVersionUID = 1L;

    private Long id;

    public {class_name} id(Long id) {{
        this.setId(id);
        return this;
    }}
}}
"""


def dto_source(class_name: str, package: str = f"{PACKAGE}.service.dto") -> str:
    return f"""package {package};

import java.io.Serializable;
import java.util.Objects;

/**
 * A DTO for the entity.
 */
public class {class_name} implements Serializable {{

    private Long id;
}}
"""


ARCHITECTURE_TEST = f"""package {PACKAGE};

import static com.tngtech.archunit.base.DescribedPredicate.alwaysTrue;
import static com.tngtech.archunit.core.domain.JavaClass.Predicates.belongToAnyOf;
import static com.tngtech.archunit.library.Architectures.layeredArchitecture;

import com.tngtech.archunit.core.importer.ImportOption.DoNotIncludeTests;
import com.tngtech.archunit.junit.AnalyzeClasses;
import com.tngtech.archunit.junit.ArchTest;
import com.tngtech.archunit.lang.ArchRule;

@AnalyzeClasses(packagesOf = JhipsterApp.class, importOptions = DoNotIncludeTests.class)
class TechnicalStructureTest {{

    // prettier-ignore
    @ArchTest
    static final ArchRule respectsTechnicalArchitectureLayers = layeredArchitecture()
        .consideringAllDependencies()
        .layer("Config").definedBy("..config..")
        .layer("Domain").definedBy("..domain..")

        .whereLayer("Config").mayNotBeAccessedByAnyLayer()
        .whereLayer("Domain").mayOnlyBeAccessedByLayers("Config")

        .ignoreDependency(belongToAnyOf(JhipsterApp.class), alwaysTrue())
        .ignoreDependency(alwaysTrue(), belongToAnyOf(
            {PACKAGE}.config.Constants.class
        ));
}}
"""


